"""
Response headers for the admin API
"""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from relief_api.core.config import settings

API_VERSION = "v1"

BASE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    # Identity, permission and audit payloads must not be cached by proxies
    "Cache-Control": "no-store",
    "API-Version": API_VERSION,
}

PRODUCTION_HEADERS = {
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}


def response_headers(environment: str) -> dict:
    headers = dict(BASE_HEADERS)
    if environment == "production":
        headers.update(PRODUCTION_HEADERS)
    return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, environment: str = None):
        super().__init__(app)
        self.headers = response_headers(environment or settings.ENVIRONMENT)

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        # CORS preflight answers are left untouched
        if request.method != "OPTIONS":
            for name, value in self.headers.items():
                response.headers.setdefault(name, value)

        return response
