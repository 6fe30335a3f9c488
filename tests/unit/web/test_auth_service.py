#!/usr/bin/env python3
"""
Tests for signup, login, email verification and password reset.
"""

from datetime import timedelta

import pytest
from sqlalchemy import select

from core.security import TokenService, verify_password
from core.utils import utc_now
from database.models import EmailVerification
from web.backend.exceptions import (
    AuthenticationException,
    ConflictException,
    NotFoundException,
    ValidationException
)
from web.backend.models.requests import SignupRequest
from web.backend.services.auth_service import AuthService, FORGOT_PASSWORD_MESSAGE
from tests import TEST_PASSWORD, days_from_today

pytestmark = pytest.mark.db


def _signup_request(**overrides) -> SignupRequest:
    fields = dict(
        person1_first_name="Ann",
        person1_last_name="Lee",
        person2_first_name="Bo",
        person2_last_name="Kim",
        email="Ann.Bo@Example.com",
        password="Password1",
        wedding_date=days_from_today(180),
        wedding_location="Austin, TX",
        wedding_theme="Rustic",
        estimated_budget=25000,
        vendor_categories=["PHOTOGRAPHER", "VENUE"],
    )
    fields.update(overrides)
    return SignupRequest(**fields)


@pytest.fixture
def service(db_session, app_config, notifications):
    return AuthService(db_session, app_config, TokenService(app_config.auth), notifications)


def _verification_for(db_session, email):
    return db_session.execute(
        select(EmailVerification).where(EmailVerification.email == email)
    ).scalar_one_or_none()


class TestSignup:

    def test_signup_requires_verification(self, service, db_session, notifications):
        user = service.signup(_signup_request())

        assert user.email == "ann.bo@example.com"
        assert user.is_email_verified is False
        assert user.profile_completed is False
        assert user.vendor_categories == ["PHOTOGRAPHER", "VENUE"]
        assert verify_password("Password1", user.password_hash)

        record = _verification_for(db_session, "ann.bo@example.com")
        assert record is not None
        notifications.send_verification_email.assert_called_once_with(
            "ann.bo@example.com", "Ann Lee & Bo Kim", record.token
        )

    def test_signup_without_verification(self, db_session, app_config, notifications):
        app_config.auth.require_email_verification = False
        service = AuthService(db_session, app_config, TokenService(app_config.auth), notifications)

        user = service.signup(_signup_request())

        assert user.is_email_verified is True
        assert user.profile_completed is True
        notifications.send_verification_email.assert_not_called()
        assert _verification_for(db_session, user.email) is None

    def test_duplicate_email_conflicts(self, service, make_user):
        make_user(email="taken@example.com")

        with pytest.raises(ConflictException):
            service.signup(_signup_request(email="TAKEN@example.com"))

    def test_email_failure_does_not_fail_signup(self, service, notifications):
        notifications.send_verification_email.return_value = False

        user = service.signup(_signup_request())

        assert user.id is not None


class TestSignupRequestValidation:

    @pytest.mark.parametrize("password", ["short1A", "alllowercase1", "ALLUPPERCASE1", "NoDigitsHere"])
    def test_weak_passwords_rejected(self, password):
        with pytest.raises(ValueError):
            _signup_request(password=password)

    @pytest.mark.parametrize("days", [0, -1, 365 * 3 + 5])
    def test_wedding_date_must_be_future_and_within_three_years(self, days):
        with pytest.raises(ValueError):
            _signup_request(wedding_date=days_from_today(days))

    @pytest.mark.parametrize("budget", [999, 1_000_001])
    def test_budget_bounds(self, budget):
        with pytest.raises(ValueError):
            _signup_request(estimated_budget=budget)

    def test_unknown_vendor_category(self):
        with pytest.raises(ValueError):
            _signup_request(vendor_categories=["JUGGLER"])

    def test_empty_vendor_categories(self):
        with pytest.raises(ValueError):
            _signup_request(vendor_categories=[])


class TestLogin:

    def test_login_returns_token(self, service, app_config, make_user):
        user = make_user(email="couple@example.com")

        token, logged_in = service.login("couple@example.com", TEST_PASSWORD)

        assert logged_in.id == user.id
        claims = TokenService(app_config.auth).decode_access_token(token)
        assert claims.user_id == user.id

    def test_wrong_password(self, service, make_user):
        make_user(email="couple@example.com")

        with pytest.raises(AuthenticationException):
            service.login("couple@example.com", "Wrong1234")

    def test_unknown_email(self, service):
        with pytest.raises(AuthenticationException):
            service.login("nobody@example.com", TEST_PASSWORD)

    def test_unverified_user_is_refused(self, service, make_user):
        make_user(email="couple@example.com", is_email_verified=False)

        with pytest.raises(AuthenticationException) as exc_info:
            service.login("couple@example.com", TEST_PASSWORD)
        assert exc_info.value.extra == {"requires_verification": True}


class TestEmailVerification:

    def test_verify_marks_user_verified_and_deletes_token(self, service, db_session):
        service.signup(_signup_request())
        token = _verification_for(db_session, "ann.bo@example.com").token

        user = service.verify_email(token)

        assert user.is_email_verified is True
        assert user.profile_completed is True
        assert _verification_for(db_session, "ann.bo@example.com") is None

    def test_unknown_token(self, service):
        with pytest.raises(ValidationException):
            service.verify_email("nope")

    def test_expired_token_is_deleted(self, service, db_session):
        service.signup(_signup_request())
        record = _verification_for(db_session, "ann.bo@example.com")
        record.expires_at = utc_now() - timedelta(minutes=1)
        db_session.commit()

        with pytest.raises(ValidationException):
            service.verify_email(record.token)

        assert _verification_for(db_session, "ann.bo@example.com") is None

    def test_resend_replaces_token(self, service, db_session, notifications):
        service.signup(_signup_request())
        old_token = _verification_for(db_session, "ann.bo@example.com").token

        service.resend_verification("ann.bo@example.com")

        new_token = _verification_for(db_session, "ann.bo@example.com").token
        assert new_token != old_token
        assert notifications.send_verification_email.call_count == 2
        with pytest.raises(ValidationException):
            service.verify_email(old_token)

    def test_resend_unknown_email(self, service):
        with pytest.raises(NotFoundException):
            service.resend_verification("nobody@example.com")

    def test_resend_already_verified(self, service, make_user):
        make_user(email="couple@example.com")

        with pytest.raises(ConflictException):
            service.resend_verification("couple@example.com")


class TestPasswordReset:

    def test_forgot_password_same_response_for_unknown_email(self, service, notifications):
        assert service.forgot_password("nobody@example.com") == FORGOT_PASSWORD_MESSAGE
        notifications.send_password_reset_email.assert_not_called()

    def test_forgot_then_reset(self, service, make_user, notifications):
        user = make_user(email="couple@example.com")

        assert service.forgot_password("couple@example.com") == FORGOT_PASSWORD_MESSAGE

        token = user.password_reset_token
        assert token
        notifications.send_password_reset_email.assert_called_once_with(
            "couple@example.com", user.display_name, token
        )

        service.reset_password(token, "NewPassword2")

        assert user.password_reset_token is None
        assert user.password_reset_expires is None
        assert verify_password("NewPassword2", user.password_hash)
        service.login("couple@example.com", "NewPassword2")

    def test_reset_with_expired_token(self, service, db_session, make_user):
        user = make_user(email="couple@example.com")
        service.forgot_password("couple@example.com")
        user.password_reset_expires = utc_now() - timedelta(minutes=1)
        db_session.commit()

        with pytest.raises(ValidationException):
            service.reset_password(user.password_reset_token, "NewPassword2")

    def test_reset_with_unknown_token(self, service):
        with pytest.raises(ValidationException):
            service.reset_password("nope", "NewPassword2")
