#!/usr/bin/env python3
"""
Auth service - signup, login, email verification and password reset.
"""

import logging
from datetime import timedelta
from typing import Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.config_loader import AppConfig
from core.security import TokenService, hash_password, verify_password, generate_opaque_token
from core.utils import utc_now, ensure_utc, mask_email
from database.models import User
from database.repository import Repositories
from notification import NotificationService
from ..models.requests import SignupRequest
from ..exceptions import (
    AuthenticationException,
    ConflictException,
    NotFoundException,
    ValidationException
)

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, a password reset link has been sent"


class AuthService:
    """Account lifecycle: credentials, verification tokens and reset tokens."""

    def __init__(
        self,
        db: Session,
        config: AppConfig,
        token_service: TokenService,
        notifications: NotificationService
    ):
        self.db = db
        self.repos = Repositories(db)
        self.config = config
        self.token_service = token_service
        self.notifications = notifications

    def signup(self, request: SignupRequest) -> User:
        """
        Create an account.

        When email verification is required the user starts unverified and a
        verification email is sent; otherwise the account is usable at once.

        Raises:
            ConflictException: Email already registered.
        """
        email = request.email.lower()
        if self.repos.users.email_exists(email):
            raise ConflictException("User with this email already exists")

        verified = not self.config.auth.require_email_verification

        try:
            user = self.repos.users.create(
                email=email,
                password_hash=hash_password(request.password, self.config.auth.bcrypt_rounds),
                person1_first_name=request.person1_first_name.strip(),
                person1_last_name=request.person1_last_name.strip(),
                person2_first_name=request.person2_first_name.strip(),
                person2_last_name=request.person2_last_name.strip(),
                wedding_date=request.wedding_date,
                wedding_location=request.wedding_location.strip(),
                wedding_theme=request.wedding_theme.strip(),
                estimated_budget=request.estimated_budget,
                vendor_categories=[c.value for c in request.vendor_categories or []],
                is_email_verified=verified,
                profile_completed=verified
            )

            token = None
            if not verified:
                token = generate_opaque_token()
                self.repos.verifications.replace_for_email(email, token, self._expiry(self.config.auth.verification_token_hours))

            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictException("User with this email already exists")

        logger.info(f"User {user.id} signed up ({mask_email(email)}, verified={verified})")

        if token:
            self.notifications.send_verification_email(email, user.display_name, token)

        return user

    def login(self, email: str, password: str) -> Tuple[str, User]:
        """
        Check credentials and issue an access token.

        Raises:
            AuthenticationException: Bad credentials or unverified email.
        """
        user = self.repos.users.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.info(f"Failed login for {mask_email(email)}")
            raise AuthenticationException("Invalid email or password")

        if not user.is_email_verified:
            raise AuthenticationException(
                "Please verify your email before logging in",
                extra={"requires_verification": True}
            )

        token = self.token_service.create_access_token(user.id, user.email)
        return token, user

    def verify_email(self, token: str) -> User:
        """
        Redeem a verification token.

        Raises:
            ValidationException: Unknown or expired token.
            NotFoundException: Token belongs to an email with no account.
        """
        record = self.repos.verifications.get_by_token(token)
        if not record:
            raise ValidationException("Invalid verification token")

        if ensure_utc(record.expires_at) < utc_now():
            self.repos.verifications.delete(record)
            self.db.commit()
            raise ValidationException("Verification token has expired")

        user = self.repos.users.get_by_email(record.email)
        if not user:
            self.repos.verifications.delete(record)
            self.db.commit()
            raise NotFoundException("User not found")

        user.is_email_verified = True
        user.profile_completed = True
        self.repos.verifications.delete(record)
        self.db.commit()

        logger.info(f"User {user.id} verified their email")
        return user

    def resend_verification(self, email: str) -> None:
        """
        Raises:
            NotFoundException: No account for the email.
            ConflictException: Email already verified.
        """
        user = self.repos.users.get_by_email(email)
        if not user:
            raise NotFoundException("User not found")

        if user.is_email_verified:
            raise ConflictException("Email is already verified")

        token = generate_opaque_token()
        self.repos.verifications.replace_for_email(
            user.email, token, self._expiry(self.config.auth.verification_token_hours)
        )
        self.db.commit()

        self.notifications.send_verification_email(user.email, user.display_name, token)

    def forgot_password(self, email: str) -> str:
        """
        Start a password reset.

        Responds identically whether or not the account exists.
        """
        user = self.repos.users.get_by_email(email)
        if user:
            token = generate_opaque_token()
            user.password_reset_token = token
            user.password_reset_expires = self._expiry(self.config.auth.password_reset_token_hours)
            self.db.commit()

            self.notifications.send_password_reset_email(user.email, user.display_name, token)
        else:
            logger.info(f"Password reset requested for unknown email {mask_email(email)}")

        return FORGOT_PASSWORD_MESSAGE

    def reset_password(self, token: str, password: str) -> None:
        """
        Raises:
            ValidationException: Token unknown or expired.
        """
        user = self.repos.users.get_by_reset_token(token)
        expires = ensure_utc(user.password_reset_expires) if user else None
        if not user or expires is None or expires < utc_now():
            raise ValidationException("Invalid or expired reset token")

        user.password_hash = hash_password(password, self.config.auth.bcrypt_rounds)
        user.password_reset_token = None
        user.password_reset_expires = None
        self.db.commit()

        logger.info(f"User {user.id} reset their password")

    @staticmethod
    def _expiry(hours: int):
        return utc_now() + timedelta(hours=hours)
