import logging
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes.

    SQLite drops tzinfo on round-trip while PostgreSQL keeps it, so values
    read back from the database are normalised before comparing them with
    aware datetimes.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def mask_email(email: str) -> str:
    """
    Mask email address for safe logging.

    Shows only domain, e.g., "***@example.com"
    """
    if '@' not in email:
        return "***"
    _, domain = email.rsplit('@', 1)
    return f"***@{domain}"
