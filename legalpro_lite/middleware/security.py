"""
Security Middleware
===================

Security headers on every response, optional redirect of plain HTTP to HTTPS.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from ..config import get_settings

CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "script-src 'self'; "
    "style-src 'self' 'unsafe-inline'; "
    "img-src 'self' data: blob:; "
    "font-src 'self' data:; "
    "connect-src 'self'; "
    "frame-ancestors 'none';"
)


def _is_https(request: Request) -> bool:
    # Behind a proxy the scheme arrives in X-Forwarded-Proto
    return request.url.scheme == "https" or request.headers.get("x-forwarded-proto", "") == "https"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Headers added:
    - X-Content-Type-Options
    - X-Frame-Options
    - Referrer-Policy
    - Content-Security-Policy
    - Strict-Transport-Security (HTTPS requests only)
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        settings = get_settings()

        if settings.enforce_https and not _is_https(request):
            url = str(request.url).replace("http://", "https://", 1)
            return RedirectResponse(url, status_code=301)

        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = CONTENT_SECURITY_POLICY

        if _is_https(request):
            response.headers["Strict-Transport-Security"] = (
                f"max-age={settings.hsts_max_age}; includeSubDomains"
            )

        return response
