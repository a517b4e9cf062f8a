"""
Middleware Package
==================

Starlette middleware mounted by the LegalPro app.
"""

from .security import SecurityHeadersMiddleware

__all__ = [
    "SecurityHeadersMiddleware",
]
