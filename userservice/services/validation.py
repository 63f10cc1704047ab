"""Input validation for account registration."""

from email_validator import EmailNotValidError, validate_email

from userservice.core.exceptions import ValidationError
from userservice.core.security import BCRYPT_MAX_PASSWORD_BYTES
from userservice.models.user import Role
from userservice.repositories.users import CredentialStore
from userservice.schemas.auth import RegisterRequest

USERNAME_MIN_LEN = 5
USERNAME_MAX_LEN = 50
EMAIL_MIN_LEN = 5
EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_BYTES = BCRYPT_MAX_PASSWORD_BYTES


def _username_errors(username: str) -> list[str]:
    errors = []
    if not username.strip():
        errors.append("Username cannot be blank")
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        errors.append(
            f"Username must be between {USERNAME_MIN_LEN} and {USERNAME_MAX_LEN} characters long"
        )
    return errors


def _email_errors(email: str) -> list[str]:
    errors = []
    if not email.strip():
        errors.append("Email address cannot be blank")
    if not (EMAIL_MIN_LEN <= len(email) <= EMAIL_MAX_LEN):
        errors.append(
            f"Email address must be between {EMAIL_MIN_LEN} and {EMAIL_MAX_LEN} characters long"
        )
    if email.strip():
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            errors.append("Email address must be in the format user@example.com")
    return errors


def _password_errors(password: str) -> list[str]:
    if len(password) < PASSWORD_MIN_LEN:
        return [f"Password length must be at least {PASSWORD_MIN_LEN} characters"]
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        return [f"Password must not exceed {PASSWORD_MAX_BYTES} bytes"]
    return []


def _role_errors(role: str | None) -> list[str]:
    if role is None or role in Role._value2member_map_:
        return []
    allowed = ", ".join(r.value for r in Role)
    return [f"Role must be one of: {allowed}"]


def _uniqueness_errors(request: RegisterRequest, users: CredentialStore) -> list[str]:
    errors = []
    if request.username and users.find_by_username(request.username) is not None:
        errors.append("Username is already taken")
    if request.email and users.find_by_email(request.email) is not None:
        errors.append("Email address is already registered")
    return errors


def validate_registration(
    request: RegisterRequest, users: CredentialStore | None = None
) -> Role:
    """
    Check every registration constraint and return the resolved role.

    When users is given, the username and email must not already be taken.
    Raises ValidationError listing all violations, not just the first.
    """
    errors = (
        _username_errors(request.username)
        + _email_errors(request.email)
        + _password_errors(request.password)
        + _role_errors(request.role)
    )
    if users is not None:
        errors += _uniqueness_errors(request, users)
    if errors:
        raise ValidationError(errors)
    return Role(request.role) if request.role is not None else Role.USER
