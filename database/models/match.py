import enum
import uuid

from sqlalchemy import Column, Text, Integer, DateTime, JSON, Uuid, Enum, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from core.utils import utc_now
from .base import Base


class MatchStatus(str, enum.Enum):
    PENDING = 'PENDING'
    ACCEPTED = 'ACCEPTED'
    DECLINED = 'DECLINED'
    EXPIRED = 'EXPIRED'


def make_pair_key(user_a, user_b) -> str:
    """Direction-independent key for a pair of user ids."""
    first, second = sorted([str(user_a), str(user_b)])
    return f"{first}:{second}"


class Match(Base):
    """
    A cost-sharing partnership request between two couples.

    Created PENDING by the initiator; the receiver moves it once to
    ACCEPTED or DECLINED. Score, shared categories and savings are
    snapshots taken at creation and are not recomputed.
    """
    __tablename__ = 'matches'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    initiator_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    receiver_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    # Sorted "{id}:{id}" so one row exists per unordered pair
    pair_key = Column(Text, nullable=False)

    status = Column(
        Enum(MatchStatus, name='match_status', values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=MatchStatus.PENDING
    )
    compatibility_score = Column(Integer)
    shared_vendor_categories = Column(JSON, nullable=False, default=list)
    estimated_savings = Column(Integer)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    initiator = relationship("User", foreign_keys=[initiator_id], back_populates="initiated_matches")
    receiver = relationship("User", foreign_keys=[receiver_id], back_populates="received_matches")
    messages = relationship("Message", back_populates="match", passive_deletes=True)

    __table_args__ = (
        UniqueConstraint('initiator_id', 'receiver_id', name='uq_matches_initiator_receiver'),
        UniqueConstraint('pair_key', name='uq_matches_pair_key'),
        Index('idx_matches_initiator', 'initiator_id'),
        Index('idx_matches_receiver', 'receiver_id'),
        Index('idx_matches_status', 'status'),
        Index('idx_matches_updated', 'updated_at'),
    )

    def involves(self, user_id) -> bool:
        return user_id in (self.initiator_id, self.receiver_id)

    def other_participant(self, user_id):
        return self.receiver_id if user_id == self.initiator_id else self.initiator_id
