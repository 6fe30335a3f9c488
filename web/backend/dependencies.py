#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.

The database manager, configuration and token service are created by
create_app() and kept on app.state, so tests can build an app around an
in-memory database without touching module globals.
"""

import logging
from typing import Generator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from core.config_loader import AppConfig
from core.security import TokenError, TokenService
from database.database import DatabaseManager
from database.models import User
from database.repositories import UserRepository
from .exceptions import AuthenticationException, ForbiddenException

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_db_manager(request: Request) -> DatabaseManager:
    return request.app.state.db_manager


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @router.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...

    Yields:
        Session: Database session that will be automatically closed.
    """
    yield from get_db_manager(request).get_session()


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
) -> User:
    """
    Resolve the caller from the bearer token.

    Raises:
        AuthenticationException: Missing, invalid or expired token, or unknown user.
        ForbiddenException: The account has not verified its email.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Access token required")

    try:
        claims = token_service.decode_access_token(credentials.credentials)
    except TokenError as e:
        raise AuthenticationException(str(e))

    user = UserRepository(db).get_by_id(claims.user_id)
    if not user:
        raise AuthenticationException("User not found")

    if not user.is_email_verified:
        raise ForbiddenException(
            "Please verify your email address",
            extra={"requires_verification": True}
        )

    return user
