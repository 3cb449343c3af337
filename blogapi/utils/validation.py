"""Field-level checks for user and post input.

Every rule runs independently so a caller gets the full list of problems at
once; an empty list means the input is acceptable.
"""
from email_validator import EmailNotValidError, validate_email

from blogapi.errors import InvalidInput

MIN_PASSWORD_LENGTH = 5
MIN_TITLE_LENGTH = 5
MIN_CONTENT_LENGTH = 5


def is_email(value: str | None) -> bool:
    if not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_user_input(email: str | None, password: str | None) -> list[dict]:
    errors = []
    if not is_email(email):
        errors.append({"message": "Email is invalid!"})
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        errors.append({"message": "Password is invalid!"})
    return errors


def validate_post_input(title: str | None, content: str | None) -> list[dict]:
    errors = []
    if len(title or "") < MIN_TITLE_LENGTH:
        errors.append({"message": "Title is too short!"})
    if len(content or "") < MIN_CONTENT_LENGTH:
        errors.append({"message": "Content is too short!"})
    return errors


def raise_for_errors(errors: list[dict]) -> None:
    if errors:
        raise InvalidInput("Invalid data entered!", data=errors)
