"""
FastAPI dependencies shared by the routers.
"""

from typing import Generator, Optional

from fastapi import Header, Request
from sqlalchemy.orm import Session

from .auth import AuthContext, decode_token
from .config import get_settings
from .db.session import get_db
from .errors import BadRequest, Unauthorized


def get_db_dependency() -> Generator[Session, None, None]:
    """Get database session for FastAPI dependency injection"""
    yield from get_db()


def _session_token(request: Request, authorization: Optional[str]) -> Optional[str]:
    token = request.cookies.get(get_settings().session_cookie_name)
    if token:
        return token
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


def require_session(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> AuthContext:
    """
    Session from the `token` cookie or an `Authorization: Bearer` header.

    Raises Unauthorized when the token is missing, malformed or expired.
    """
    token = _session_token(request, authorization)
    if not token:
        raise Unauthorized()

    payload = decode_token(token)
    if not payload:
        raise Unauthorized()

    auth = AuthContext.from_token_payload(payload)
    if auth is None:
        raise Unauthorized()
    return auth


def expected_version(if_match: Optional[str] = Header(None, alias="If-Match")) -> Optional[int]:
    """Version the client last saw, from `If-Match: <version>` (quotes and W/ allowed)."""
    if if_match is None or not if_match.strip() or if_match.strip() == "*":
        return None
    value = if_match.strip()
    if value.startswith("W/"):
        value = value[2:]
    value = value.strip('"')
    try:
        return int(value)
    except ValueError:
        raise BadRequest("If-Match must be a record version number")

