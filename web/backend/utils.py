#!/usr/bin/env python3
"""
Utility functions for the web application.
"""

import math
import uuid
from datetime import date, datetime
from typing import Optional, Any, Tuple

from .exceptions import ValidationException
from .models.responses import Pagination


def safe_str(value: Optional[Any], default: str = "") -> str:
    """
    Safely convert value to string.

    Args:
        value: Value to convert.
        default: Default value if value is None.

    Returns:
        String value.
    """
    if value is None:
        return default
    return str(value)


def safe_datetime_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Safely convert datetime (or date) to ISO format string.

    Args:
        dt: Datetime or date object.

    Returns:
        ISO format string or None.
    """
    if dt is None:
        return None
    return dt.isoformat()


def validate_uuid(value: str, field: str = "id") -> uuid.UUID:
    """Parse a path or body id, raising ValidationException if it is not a UUID."""
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise ValidationException(f"Invalid {field} format: {value}. Must be a valid UUID.")


def parse_date(value: Optional[str], field: str) -> Optional[date]:
    """Parse an ISO date query parameter."""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationException(f"Invalid {field}: {value}. Expected YYYY-MM-DD.")


def page_bounds(page: int, limit: int) -> Tuple[int, int]:
    """Offset and limit for a 1-based page."""
    page = max(1, page)
    return (page - 1) * limit, limit


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    return Pagination(
        current_page=page,
        total_pages=math.ceil(total / limit) if limit else 0,
        total_count=total,
        has_next=page * limit < total,
        has_prev=page > 1
    )
