#!/usr/bin/env python3
"""
ORM to response model conversion shared by the services.
"""

from typing import Optional

from database.models import User, Message
from ..models.responses import (
    UserSummary,
    PublicProfile,
    PrivateProfile,
    MessageSummary,
    MessageDetail
)
from ..utils import safe_str, safe_datetime_iso


def _category_values(categories) -> list:
    return [getattr(c, 'value', c) for c in (categories or [])]


def to_user_summary(user: User) -> UserSummary:
    return UserSummary(
        id=str(user.id),
        person1_first_name=user.person1_first_name,
        person1_last_name=user.person1_last_name,
        person2_first_name=user.person2_first_name,
        person2_last_name=user.person2_last_name,
        display_name=user.display_name,
        profile_picture=user.profile_picture
    )


def _public_fields(user: User) -> dict:
    return dict(
        to_user_summary(user).model_dump(),
        wedding_date=safe_datetime_iso(user.wedding_date),
        wedding_location=safe_str(user.wedding_location),
        wedding_theme=safe_str(user.wedding_theme),
        estimated_budget=user.estimated_budget,
        vendor_categories=_category_values(user.vendor_categories),
        bio=user.bio,
        allow_messages=user.allow_messages,
        created_at=safe_datetime_iso(user.created_at)
    )


def to_public_profile(user: User, compatibility_score: Optional[int] = None) -> PublicProfile:
    return PublicProfile(**_public_fields(user), compatibility_score=compatibility_score)


def to_private_profile(user: User) -> PrivateProfile:
    return PrivateProfile(
        **_public_fields(user),
        email=user.email,
        is_email_verified=user.is_email_verified,
        profile_completed=user.profile_completed,
        profile_visible=user.profile_visible,
        updated_at=safe_datetime_iso(user.updated_at)
    )


def to_message_summary(message: Message) -> MessageSummary:
    return MessageSummary(
        id=str(message.id),
        content=message.content,
        sender_id=str(message.sender_id),
        receiver_id=str(message.receiver_id),
        match_id=str(message.match_id) if message.match_id else None,
        is_read=message.is_read,
        created_at=safe_datetime_iso(message.created_at)
    )


def to_message_detail(message: Message) -> MessageDetail:
    return MessageDetail(
        **to_message_summary(message).model_dump(),
        sender=to_user_summary(message.sender) if message.sender else None,
        receiver=to_user_summary(message.receiver) if message.receiver else None
    )
