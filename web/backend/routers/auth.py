#!/usr/bin/env python3
"""
Auth endpoints - signup, login, email verification and password reset.
"""

import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from ..dependencies import get_db, get_app_config, get_token_service
from ..services.auth_service import AuthService
from ..services.serializers import to_private_profile
from ..models.requests import (
    SignupRequest,
    LoginRequest,
    EmailRequest,
    VerifyEmailRequest,
    ResetPasswordRequest
)
from ..models.responses import (
    SignupResponse,
    LoginResponse,
    ProfileResponse,
    MessageResponse
)

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)

AUTH_RATE_LIMIT = "20/minute"

router = APIRouter(prefix="/api/auth", tags=["auth"])


def add_rate_limit_handlers(app):
    """Add rate limit exception handlers to the FastAPI app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": f"Too many requests: {exc.detail}",
            "type": "RateLimitExceeded"
        }
    )


def _auth_service(request: Request, db: Session) -> AuthService:
    return AuthService(
        db,
        get_app_config(request),
        get_token_service(request),
        request.app.state.notification_service
    )


@router.post("/signup", response_model=SignupResponse, status_code=201)
@limiter.limit(AUTH_RATE_LIMIT)
def signup(
    request: Request,
    body: SignupRequest,
    db: Session = Depends(get_db)
):
    """
    Create a couple's account.

    Sends a verification email unless verification is disabled in config.
    """
    service = _auth_service(request, db)
    user = service.signup(body)

    if user.is_email_verified:
        message = "Account created successfully"
    else:
        message = "Account created. Please check your email to verify your account."

    return SignupResponse(success=True, message=message, user=to_private_profile(user))


@router.post("/login", response_model=LoginResponse)
@limiter.limit(AUTH_RATE_LIMIT)
def login(
    request: Request,
    body: LoginRequest,
    db: Session = Depends(get_db)
):
    """Exchange email and password for a bearer token."""
    service = _auth_service(request, db)
    token, user = service.login(body.email, body.password)

    return LoginResponse(
        success=True,
        message="Login successful",
        token=token,
        user=to_private_profile(user)
    )


@router.post("/verify-email", response_model=ProfileResponse)
def verify_email(
    request: Request,
    body: VerifyEmailRequest,
    db: Session = Depends(get_db)
):
    service = _auth_service(request, db)
    user = service.verify_email(body.token)

    return ProfileResponse(
        success=True,
        message="Email verified successfully",
        user=to_private_profile(user)
    )


@router.post("/resend-verification", response_model=MessageResponse)
@limiter.limit(AUTH_RATE_LIMIT)
def resend_verification(
    request: Request,
    body: EmailRequest,
    db: Session = Depends(get_db)
):
    service = _auth_service(request, db)
    service.resend_verification(body.email)
    return MessageResponse(success=True, message="Verification email sent")


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit(AUTH_RATE_LIMIT)
def forgot_password(
    request: Request,
    body: EmailRequest,
    db: Session = Depends(get_db)
):
    """Same response whether or not the email is registered."""
    service = _auth_service(request, db)
    message = service.forgot_password(body.email)
    return MessageResponse(success=True, message=message)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    request: Request,
    body: ResetPasswordRequest,
    db: Session = Depends(get_db)
):
    service = _auth_service(request, db)
    service.reset_password(body.token, body.password)
    return MessageResponse(success=True, message="Password reset successfully")
