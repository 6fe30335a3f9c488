#!/usr/bin/env python3
"""
Credential and token handling.

- Password hashing and verification (bcrypt)
- Signed access tokens for bearer authentication (PyJWT, HMAC)
- Opaque random tokens for email verification and password reset
"""

import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import timedelta

import bcrypt
import jwt

from core.config_loader import AuthConfig
from core.utils import utc_now

logger = logging.getLogger(__name__)


class TokenError(Exception):
    """Raised when an access token is missing, malformed, forged or expired."""
    pass


def hash_password(password: str, rounds: int = 12) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Password hash in unexpected format")
        return False


def generate_opaque_token() -> str:
    """Random URL-safe token for email verification and password reset links."""
    return secrets.token_urlsafe(32)


@dataclass
class TokenClaims:
    user_id: uuid.UUID
    email: str


class TokenService:
    """Issues and verifies signed bearer tokens."""

    def __init__(self, config: AuthConfig):
        if not config.jwt_secret:
            raise ValueError("JWT secret is not configured (set JWT_SECRET)")
        self.secret = config.jwt_secret
        self.algorithm = config.jwt_algorithm
        self.expires = timedelta(days=config.access_token_expires_days)

    def create_access_token(self, user_id: uuid.UUID, email: str) -> str:
        now = utc_now()
        payload = {
            'sub': str(user_id),
            'email': email,
            'iat': now,
            'exp': now + self.expires,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_access_token(self, token: str) -> TokenClaims:
        """
        Verify a token's signature and expiry.

        Raises:
            TokenError: If the token is expired, forged or malformed.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            raise TokenError("Token expired") from e
        except jwt.InvalidTokenError as e:
            raise TokenError("Invalid token") from e

        try:
            return TokenClaims(user_id=uuid.UUID(payload['sub']), email=payload.get('email', ''))
        except (KeyError, ValueError) as e:
            raise TokenError("Invalid token subject") from e
