"""User and account exceptions."""

from .base import BaseAppException, NotFoundError


class UserNotFoundError(NotFoundError):
    """Raised when an authenticated user id no longer matches a stored user."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message=message, error_code="USER_NOT_FOUND")


class UserAlreadyExistsError(BaseAppException):
    """Raised when signing up with an email that is already registered."""

    def __init__(self, message: str = "User already exists"):
        super().__init__(message=message, status_code=400, error_code="USER_ALREADY_EXISTS")


class InvalidCredentialsError(BaseAppException):
    """Raised when email and password do not match an account."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message=message, status_code=401, error_code="INVALID_CREDENTIALS")
