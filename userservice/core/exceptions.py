"""Error kinds raised by the authentication flows and mapped to HTTP by the API layer."""


class UserServiceError(Exception):
    """Base class for errors raised by this service."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(UserServiceError):
    """Raised when registration input violates one or more constraints."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid input")


class AuthenticationError(UserServiceError):
    """Raised when an email/password pair does not match a stored user."""

    def __init__(self, message: str = "Bad credentials") -> None:
        super().__init__(message)


class InvalidTokenError(UserServiceError):
    """Raised when a token is malformed or its signature does not verify."""


class NotFoundError(UserServiceError):
    """Raised when a user that must exist cannot be found."""
