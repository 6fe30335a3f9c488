"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import itertools
from unittest.mock import Mock

import pytest

from core.config_loader import AppConfig, AuthConfig, DatabaseConfig, EmailConfig, StorageConfig
from core.security import hash_password
from database.database import DatabaseManager
from database.models import User
from notification import NotificationService
from tests import TEST_PASSWORD, TEST_JWT_SECRET, days_from_today

# Lowest bcrypt cost keeps the suite fast
BCRYPT_TEST_ROUNDS = 4

TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD, rounds=BCRYPT_TEST_ROUNDS)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as using the SQLite test database (deselect with '-m \"not db\"')"
    )


@pytest.fixture
def app_config(tmp_path):
    return AppConfig(
        database=DatabaseConfig(url="sqlite://", create_tables=True),
        auth=AuthConfig(jwt_secret=TEST_JWT_SECRET, bcrypt_rounds=BCRYPT_TEST_ROUNDS),
        email=EmailConfig(dry_run=True, retry_wait_seconds=0),
        storage=StorageConfig(upload_dir=str(tmp_path / "uploads")),
    )


@pytest.fixture
def db_manager(app_config):
    manager = DatabaseManager(app_config.database)
    manager.create_tables()
    yield manager
    manager.dispose()


@pytest.fixture
def db_session(db_manager):
    session = db_manager.SessionLocal()
    yield session
    session.close()


@pytest.fixture
def notifications():
    """Stand-in for email delivery; records calls instead of sending."""
    service = Mock(spec=NotificationService)
    service.send_verification_email.return_value = True
    service.send_password_reset_email.return_value = True
    return service


@pytest.fixture
def make_user(db_session):
    """
    Factory for listed, verified couples.

    Defaults give every user the same wedding, so compatibility between two
    default users is driven only by the fields a test overrides.
    """
    counter = itertools.count(1)

    def _make(**overrides) -> User:
        n = next(counter)
        fields = dict(
            email=f"couple{n}@example.com",
            password_hash=TEST_PASSWORD_HASH,
            person1_first_name=f"Ann{n}",
            person1_last_name="Lee",
            person2_first_name=f"Bo{n}",
            person2_last_name="Kim",
            wedding_date=days_from_today(200),
            wedding_location="Austin, TX",
            wedding_theme="Rustic",
            estimated_budget=20000,
            vendor_categories=["PHOTOGRAPHER", "VENUE"],
            is_email_verified=True,
            profile_completed=True,
            profile_visible=True,
            allow_messages=True,
        )
        fields.update(overrides)
        user = User(**fields)
        db_session.add(user)
        db_session.commit()
        return user

    return _make
