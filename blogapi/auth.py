import logging
from dataclasses import dataclass

from blogapi.config import Settings
from blogapi.errors import NotAuthenticated
from blogapi.utils.security import decode_access_token

logger = logging.getLogger('blogapi.auth')


@dataclass(frozen=True)
class Anonymous:
    pass


@dataclass(frozen=True)
class Authenticated:
    user_id: str
    email: str | None = None


Identity = Anonymous | Authenticated

ANONYMOUS = Anonymous()


def identify(authorization: str | None, settings: Settings) -> Identity:
    """Derive the request identity from an ``Authorization`` header.

    Never raises: a missing header, a malformed one or a token that fails
    verification all yield ``ANONYMOUS``. Whether that is acceptable is
    decided by each operation.
    """
    if not authorization:
        return ANONYMOUS

    parts = authorization.split(' ')
    if len(parts) < 2 or not parts[1]:
        logger.debug('Malformed authorization header')
        return ANONYMOUS

    payload = decode_access_token(parts[1], settings.SECRET_KEY, settings.JWT_ALGORITHM)
    if not payload or not payload.get('userId'):
        logger.debug('Rejected bearer token')
        return ANONYMOUS

    return Authenticated(user_id=str(payload['userId']), email=payload.get('email'))


def require_authenticated(identity: Identity, message: str = 'Not authenticated!') -> Authenticated:
    if not isinstance(identity, Authenticated):
        raise NotAuthenticated(message)
    return identity
