import uuid

from sqlalchemy import Column, Text, Boolean, DateTime, Uuid, ForeignKey, Index
from sqlalchemy.orm import relationship

from core.utils import utc_now
from .base import Base


class Message(Base):
    """
    A message between two couples, usually tied to their match.

    Only `is_read` changes after creation.
    """
    __tablename__ = 'messages'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    content = Column(Text, nullable=False)
    sender_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    receiver_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    match_id = Column(Uuid(as_uuid=True), ForeignKey('matches.id', ondelete='SET NULL'), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    sender = relationship("User", foreign_keys=[sender_id], back_populates="sent_messages")
    receiver = relationship("User", foreign_keys=[receiver_id], back_populates="received_messages")
    match = relationship("Match", back_populates="messages")

    __table_args__ = (
        Index('idx_messages_match_created', 'match_id', 'created_at'),
        Index('idx_messages_receiver_unread', 'receiver_id', 'is_read'),
        Index('idx_messages_pair', 'sender_id', 'receiver_id'),
    )
