#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class UserSummary(BaseModel):
    """Minimal couple identity embedded in messages and conversations."""
    id: str
    person1_first_name: str
    person1_last_name: str
    person2_first_name: str
    person2_last_name: str
    display_name: str
    profile_picture: Optional[str] = None


class PublicProfile(UserSummary):
    """Profile as other couples see it."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "person1_first_name": "Ann",
                "person1_last_name": "Lee",
                "person2_first_name": "Bo",
                "person2_last_name": "Kim",
                "display_name": "Ann Lee & Bo Kim",
                "profile_picture": None,
                "wedding_date": "2027-06-12",
                "wedding_location": "Austin, TX",
                "wedding_theme": "Rustic",
                "estimated_budget": 25000,
                "vendor_categories": ["PHOTOGRAPHER", "VENUE"],
                "bio": "Looking to share a photographer!",
                "compatibility_score": 87
            }
        }
    )

    wedding_date: str
    wedding_location: str
    wedding_theme: str
    estimated_budget: int
    vendor_categories: List[str]
    bio: Optional[str] = None
    allow_messages: Optional[bool] = None
    created_at: Optional[str] = None
    compatibility_score: Optional[int] = Field(None, ge=0, le=100)


class PrivateProfile(PublicProfile):
    """The caller's own profile, including account flags."""
    email: str
    is_email_verified: bool
    profile_completed: bool
    profile_visible: bool
    updated_at: Optional[str] = None


class MessageSummary(BaseModel):
    id: str
    content: str
    sender_id: str
    receiver_id: str
    match_id: Optional[str] = None
    is_read: bool
    created_at: Optional[str] = None


class MessageDetail(MessageSummary):
    """Message with sender/receiver summaries embedded."""
    sender: Optional[UserSummary] = None
    receiver: Optional[UserSummary] = None


class MatchRecord(BaseModel):
    """Match with both sides identified (creation and respond results)."""
    id: str
    status: str
    initiator_id: str
    receiver_id: str
    initiator: Optional[PublicProfile] = None
    receiver: Optional[PublicProfile] = None
    compatibility_score: Optional[int] = None
    shared_vendor_categories: List[str] = Field(default_factory=list)
    estimated_savings: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class MatchView(BaseModel):
    """Match seen from one participant's side."""
    id: str
    status: str
    is_initiator: bool
    other_user: PublicProfile
    compatibility_score: Optional[int] = None
    shared_vendor_categories: List[str] = Field(default_factory=list)
    estimated_savings: Optional[int] = None
    last_message: Optional[MessageSummary] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ConversationSummary(BaseModel):
    """One entry per active match in the inbox."""
    id: str
    status: str
    other_user: UserSummary
    last_message: Optional[MessageDetail] = None
    unread_count: int = Field(ge=0)
    updated_at: Optional[str] = None


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_count: int
    has_next: bool
    has_prev: bool


# --- Envelopes ---

class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    success: bool
    message: str


class SignupResponse(BaseModel):
    success: bool
    message: str
    user: PrivateProfile


class LoginResponse(BaseModel):
    success: bool
    message: str
    token: str
    user: PrivateProfile


class ProfileResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    user: PrivateProfile


class PublicProfileResponse(BaseModel):
    success: bool
    user: PublicProfile


class MarketplaceResponse(BaseModel):
    success: bool
    users: List[PublicProfile]
    pagination: Pagination


class MatchRecordResponse(BaseModel):
    success: bool
    message: str
    match: MatchRecord


class MatchesResponse(BaseModel):
    success: bool
    count: int
    matches: List[MatchView]


class MatchDetailResponse(BaseModel):
    success: bool
    match: MatchView


class MessageSentResponse(BaseModel):
    success: bool
    message: str
    data: MessageDetail


class ConversationsResponse(BaseModel):
    success: bool
    conversations: List[ConversationSummary]


class MessagePageResponse(BaseModel):
    success: bool
    messages: List[MessageDetail]
    pagination: Pagination


class MarkReadResponse(BaseModel):
    success: bool
    message: str
    count: int


class UnreadCountResponse(BaseModel):
    success: bool
    unread_count: int
