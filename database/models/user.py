import enum
import uuid

from sqlalchemy import Column, Text, Boolean, Integer, Date, DateTime, JSON, Uuid, Index
from sqlalchemy.orm import relationship

from core.utils import utc_now
from .base import Base


class VendorCategory(str, enum.Enum):
    """Type of wedding service two couples can share."""
    PHOTOGRAPHER = 'PHOTOGRAPHER'
    VIDEOGRAPHER = 'VIDEOGRAPHER'
    VENUE = 'VENUE'
    CATERING = 'CATERING'
    FLOWERS = 'FLOWERS'
    MUSIC_DJ = 'MUSIC_DJ'
    TRANSPORTATION = 'TRANSPORTATION'
    DECORATIONS = 'DECORATIONS'
    WEDDING_PLANNER = 'WEDDING_PLANNER'
    MAKEUP_HAIR = 'MAKEUP_HAIR'
    CAKE = 'CAKE'
    INVITATIONS = 'INVITATIONS'
    RENTALS = 'RENTALS'
    OTHER = 'OTHER'


class User(Base):
    """
    A couple's account: credentials, wedding details and profile flags.
    """
    __tablename__ = 'users'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)

    person1_first_name = Column(Text, nullable=False)
    person1_last_name = Column(Text, nullable=False)
    person2_first_name = Column(Text, nullable=False)
    person2_last_name = Column(Text, nullable=False)

    # Wedding details
    wedding_date = Column(Date, nullable=False)
    wedding_location = Column(Text, nullable=False)
    wedding_theme = Column(Text, nullable=False)
    estimated_budget = Column(Integer, nullable=False)
    vendor_categories = Column(JSON, nullable=False, default=list)

    # Profile state
    is_email_verified = Column(Boolean, nullable=False, default=False)
    profile_completed = Column(Boolean, nullable=False, default=False)
    profile_visible = Column(Boolean, nullable=False, default=True)
    allow_messages = Column(Boolean, nullable=False, default=True)
    bio = Column(Text)
    profile_picture = Column(Text)

    # Password reset
    password_reset_token = Column(Text, unique=True)
    password_reset_expires = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    # Relationships
    initiated_matches = relationship(
        "Match", foreign_keys="Match.initiator_id", back_populates="initiator",
        cascade="all", passive_deletes=True
    )
    received_matches = relationship(
        "Match", foreign_keys="Match.receiver_id", back_populates="receiver",
        cascade="all", passive_deletes=True
    )
    sent_messages = relationship(
        "Message", foreign_keys="Message.sender_id", back_populates="sender",
        cascade="all", passive_deletes=True
    )
    received_messages = relationship(
        "Message", foreign_keys="Message.receiver_id", back_populates="receiver",
        cascade="all", passive_deletes=True
    )

    __table_args__ = (
        Index('idx_users_wedding_date', 'wedding_date'),
        Index('idx_users_marketplace', 'profile_visible', 'profile_completed', 'is_email_verified'),
    )

    @property
    def display_name(self) -> str:
        return (
            f"{self.person1_first_name} {self.person1_last_name} & "
            f"{self.person2_first_name} {self.person2_last_name}"
        )
