import uuid

from sqlalchemy import Column, Text, DateTime, Uuid

from core.utils import utc_now
from .base import Base


class EmailVerification(Base):
    """
    Short-lived email verification token.

    One row per email; replaced on resend, deleted once used or expired.
    """
    __tablename__ = 'email_verifications'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(Text, nullable=False, unique=True)
    token = Column(Text, nullable=False, unique=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
