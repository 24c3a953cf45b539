"""
Response envelope helpers and caller classification
"""

from typing import Any, Optional

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def is_browser_request(request: Request) -> bool:
    """
    Interactive (browser) callers get redirects instead of 401 bodies.

    A request is programmatic when it accepts or sends JSON, or carries
    X-Requested-With. Everything else is treated as a browser.
    """
    accept = request.headers.get("accept", "")
    content_type = request.headers.get("content-type", "")

    if "application/json" in accept:
        return False
    if "application/json" in content_type:
        return False
    if "x-requested-with" in request.headers:
        return False
    return True


def success_response(
    data: Any = None,
    message: Optional[str] = None,
    count: Optional[int] = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    content: dict[str, Any] = {"success": True, "data": jsonable_encoder(data)}
    if message is not None:
        content["message"] = message
    if count is not None:
        content["count"] = count
    return JSONResponse(status_code=status_code, content=content)


def error_response(
    error: str,
    status_code: int,
    redirect_to: Optional[str] = None,
    message: Optional[str] = None,
) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "error": error}
    if redirect_to is not None:
        content["redirectTo"] = redirect_to
    if message is not None:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content)
