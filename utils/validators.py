from typing import Optional

from core.models import ValidationError

MIN_USERNAME_LENGTH = 4
MIN_PASSWORD_LENGTH = 6
FILL_ALL_FIELDS = 'Please fill all fields'


def is_valid_username(username: str) -> bool:
    return len(username) >= MIN_USERNAME_LENGTH


def is_valid_password(password: str) -> bool:
    return len(password) >= MIN_PASSWORD_LENGTH


def is_valid_hour(hour: int) -> bool:
    return 0 <= hour <= 23


def validate_login_form(username: str, password: str) -> None:
    if not (username or '').strip() or not password:
        raise ValidationError(FILL_ALL_FIELDS)


def validate_signup_form(username: str, password: str, confirm_password: Optional[str], name: str) -> None:
    """Проверки формы регистрации в том же порядке, что и на клиенте"""
    validate_login_form(username, password)
    if not (name or '').strip():
        raise ValidationError(FILL_ALL_FIELDS)
    if not is_valid_username(username):
        raise ValidationError(f'Username must be at least {MIN_USERNAME_LENGTH} characters')
    if not is_valid_password(password):
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
    if password != confirm_password:
        raise ValidationError("Passwords don't match")


def validate_delete_confirmation(expected_username: str, typed_username: str) -> None:
    if typed_username != expected_username:
        raise ValidationError('Type your username to confirm deletion')
