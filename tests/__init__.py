#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests run against in-memory SQLite, so no database server is needed:

    # Run all tests
    python -m pytest tests/ -v

    # Only the pure unit tests (no database)
    python -m pytest tests/ -v -m "not db"

Shared fixtures (config, database, user factory) live in tests/conftest.py.
"""

from datetime import date, timedelta

TEST_PASSWORD = "Password1"
TEST_JWT_SECRET = "test-jwt-secret-with-enough-bytes-for-hs256"


def days_from_today(days: int) -> date:
    """Wedding dates relative to today so date validation never goes stale."""
    return date.today() + timedelta(days=days)
