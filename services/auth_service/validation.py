"""
Client-side credential validation, applied before any network call.
"""

import re
from typing import Dict, Optional

from services.auth_service.models import LoginCredentials, SignupCredentials
from services.exceptions import ValidationError

# local@domain.tld, no whitespace, no consecutive or edge dots in the local part
EMAIL_PATTERN = re.compile(
    r"^(?!\.)(?!.*\.\.)[A-Za-z0-9!#$%&'*+/=?^_`{|}~.-]+(?<!\.)"
    r"@(?:[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,}$"
)

EMAIL_MESSAGE = "Please enter a valid email address"
PASSWORD_MISMATCH_MESSAGE = "Passwords don't match"


def password_length_message(min_length: int) -> str:
    return f"Password must be at least {min_length} characters"


def is_valid_email(email: str) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def _credential_errors(email: str, password: str, min_length: int) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not is_valid_email(email):
        errors["email"] = EMAIL_MESSAGE
    if len(password) < min_length:
        errors["password"] = password_length_message(min_length)
    return errors


def login_errors(credentials: LoginCredentials, min_length: int = 6) -> Dict[str, str]:
    """Field messages for a login form, in form order; empty when valid"""
    return _credential_errors(credentials.email, credentials.password, min_length)


def signup_errors(credentials: SignupCredentials, min_length: int = 6) -> Dict[str, str]:
    """Field messages for a registration form, in form order; empty when valid"""
    errors = _credential_errors(credentials.email, credentials.password, min_length)
    if len(credentials.confirm_password) < min_length:
        errors["confirm_password"] = password_length_message(min_length)
    elif credentials.confirm_password != credentials.password:
        errors["confirm_password"] = PASSWORD_MISMATCH_MESSAGE
    return errors


def validate_login(credentials: LoginCredentials, min_length: int = 6) -> None:
    """Raise ValidationError for the first failing login field"""
    _raise_if_any(login_errors(credentials, min_length))


def validate_signup(credentials: SignupCredentials, min_length: int = 6) -> None:
    """Raise ValidationError for the first failing registration field"""
    _raise_if_any(signup_errors(credentials, min_length))


def _raise_if_any(errors: Optional[Dict[str, str]]) -> None:
    if errors:
        raise ValidationError.from_errors(errors)
