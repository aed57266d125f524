"""
Error taxonomy for the user service.

Each error carries the HTTP status it maps to and a public ``detail``
string. The detail is what the client sees, so it never includes internal
state such as which credential check failed.
"""
from fastapi import status


class UserServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal server error"
    headers = None

    def __init__(self, detail: str = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class BadInput(UserServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid request"


class Conflict(BadInput):
    """Raised when a username is already taken, including when the database
    rejects a concurrent duplicate insert."""
    detail = "Username already exists"


class AuthenticationFailed(UserServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Invalid credentials"
    headers = {"WWW-Authenticate": "Bearer"}

    def __init__(self, reason: str = None):
        # reason is for logs only; the client always gets the generic detail
        self.reason = reason
        super().__init__()


class InvalidToken(AuthenticationFailed):
    detail = "Invalid token"


class NotFound(UserServiceError):
    detail = "User not found"
