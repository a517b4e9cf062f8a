"""
Authentication API
==================

Endpoints (mounted under /api):
- POST /auth/register - Create an account
- POST /auth/login    - Verify credentials, set the session cookie, return token + user
- POST /auth/logout   - Clear the session cookie
- POST /auth/forgot   - Start a password reset (always succeeds)
- POST /auth/reset    - Complete a password reset
- GET  /auth/me       - Current user
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from .auth import AuthContext, get_auth_service
from .config import get_settings
from .dependencies import get_db_dependency, require_session
from .schemas import (
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    LoginResponse,
    MeResponse,
    OkResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    UserPublic,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_expire_days * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(payload: RegisterRequest, db: Session = Depends(get_db_dependency)):
    """Register a new account. Emails are unique ignoring case."""
    user = get_auth_service(db).register(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        bar_number=payload.bar_number,
        firm=payload.firm,
    )
    return RegisterResponse(id=user.id)


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db_dependency)):
    """
    Login with email and password.
    Sets the http-only session cookie and also returns the token for bearer use.
    """
    service = get_auth_service(db)
    user = service.authenticate(payload.email, payload.password)
    token = service.issue_session(user)
    set_session_cookie(response, token)
    return LoginResponse(token=token, user=UserPublic.model_validate(user))


@router.post("/logout", response_model=OkResponse)
async def logout(response: Response):
    clear_session_cookie(response)
    return OkResponse()


@router.post("/forgot", response_model=ForgotPasswordResponse, response_model_exclude_none=True)
async def forgot_password(payload: ForgotPasswordRequest, db: Session = Depends(get_db_dependency)):
    """
    Request a password reset link.
    The response never reveals whether the email is registered.
    """
    token = get_auth_service(db).request_password_reset(payload.email)

    response = ForgotPasswordResponse()
    if token and get_settings().reset_token_exposed:
        response.token = token
    return response


@router.post("/reset", response_model=OkResponse)
async def reset_password(payload: ResetPasswordRequest, db: Session = Depends(get_db_dependency)):
    get_auth_service(db).reset_password(payload.token, payload.password)
    return OkResponse()


@router.get("/me", response_model=MeResponse)
async def me(
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db_dependency),
):
    user = get_auth_service(db).get_user(auth.user_id)
    return MeResponse(user=UserPublic.model_validate(user))
