"""
Exception handlers
Render application errors into the error envelope
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from relief_api.core.config import settings
from relief_api.core.exceptions import AuthRequiredError, ForbiddenError, ReliefAPIError
from relief_api.core.responses import error_response, is_browser_request

logger = structlog.get_logger()

ACCESS_DENIED_MESSAGE = "Insufficient permissions. Access denied."


async def relief_error_handler(request: Request, exc: ReliefAPIError):
    if isinstance(exc, AuthRequiredError):
        if exc.allow_redirect and is_browser_request(request):
            return RedirectResponse(settings.LOGIN_URL, status_code=status.HTTP_302_FOUND)
        return error_response(
            exc.message,
            exc.status_code,
            redirect_to=settings.LOGIN_URL if exc.include_redirect_hint else None,
        )

    if isinstance(exc, ForbiddenError) and exc.hint and is_browser_request(request):
        return error_response(ACCESS_DENIED_MESSAGE, exc.status_code, message=exc.hint)

    return error_response(exc.message, exc.status_code)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(str(exc.detail), exc.status_code)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = first.get("msg", "Invalid request")
    if field:
        message = f"{field}: {message}"

    logger.info("Request validation failed", path=request.url.path, errors=len(errors))
    return error_response(message, status.HTTP_400_BAD_REQUEST)


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=True
    )
    return error_response("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReliefAPIError, relief_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
