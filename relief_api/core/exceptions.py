"""
Application exceptions
Raised by dependencies and services, rendered by the handlers in core.handlers
"""

from typing import Optional

from fastapi import status


class ReliefAPIError(Exception):
    """Base class for errors rendered into the error envelope"""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class AuthRequiredError(ReliefAPIError):
    """
    Caller must (re-)authenticate.

    Browser callers are redirected to the login page; programmatic callers
    receive 401 with a redirectTo hint.
    """

    status_code = status.HTTP_401_UNAUTHORIZED
    allow_redirect = True
    include_redirect_hint = True


class AuthenticationFailedError(AuthRequiredError):
    """Unexpected failure while resolving the caller's identity"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    include_redirect_hint = False

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


class AccountDisabledError(ReliefAPIError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Account is disabled. Please contact administrator"):
        super().__init__(message)


class ForbiddenError(ReliefAPIError):
    """Authenticated but lacking the role or permission; never redirected"""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


class ValidationFailedError(ReliefAPIError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ReliefAPIError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ReliefAPIError):
    status_code = status.HTTP_409_CONFLICT


class InvalidTokenError(Exception):
    """Token could not be verified. Never rendered to a client directly."""
