from datetime import datetime, timedelta, timezone
from functools import lru_cache

from jose import JWTError, jwt
from passlib.context import CryptContext

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60  # tiempo de expiración del token (1 hora)

# ==========================
# 🔐 FUNCIONES DE CONTRASEÑA
# ==========================


@lru_cache
def _pwd_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(password: str, rounds: int = 12) -> str:
    """Hashea una contraseña en texto plano usando bcrypt"""
    return _pwd_context(rounds).hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica que la contraseña en texto plano coincida con el hash"""
    return _pwd_context(12).verify(plain_password, hashed_password)


# ==========================
# 🪙 FUNCIONES DE JWT
# ==========================

def create_access_token(
    data: dict,
    secret_key: str,
    algorithm: str = ALGORITHM,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Genera un JWT para un usuario autenticado.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def decode_access_token(token: str, secret_key: str, algorithm: str = ALGORITHM) -> dict | None:
    """
    Decodifica el JWT y devuelve los datos si es válido.
    Devuelve None si la firma no coincide, el token expiró o está mal formado.
    """
    try:
        return jwt.decode(token, secret_key, algorithms=[algorithm])
    except JWTError:
        return None
