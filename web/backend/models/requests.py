#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

import re
from datetime import date
from typing import Annotated, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, EmailStr, Field

from database.models import VendorCategory

PASSWORD_RULES = [
    (re.compile(r'[a-z]'), 'Password must contain at least one lowercase letter'),
    (re.compile(r'[A-Z]'), 'Password must contain at least one uppercase letter'),
    (re.compile(r'\d'), 'Password must contain at least one number'),
]

MAX_WEDDING_YEARS_AHEAD = 3


def _add_years(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return day.replace(year=day.year + years, day=28)


def validate_password_strength(password: str) -> str:
    if len(password) < 8:
        raise ValueError('Password must be at least 8 characters')
    for pattern, message in PASSWORD_RULES:
        if not pattern.search(password):
            raise ValueError(message)
    return password


def validate_wedding_date(wedding_date: date) -> date:
    today = date.today()
    if not (today < wedding_date <= _add_years(today, MAX_WEDDING_YEARS_AHEAD)):
        raise ValueError('Wedding date must be in the future and within 3 years')
    return wedding_date


StrongPassword = Annotated[str, AfterValidator(validate_password_strength)]
WeddingDate = Annotated[date, AfterValidator(validate_wedding_date)]


class SignupRequest(BaseModel):
    """Request to create an account for a couple."""
    person1_first_name: str = Field(min_length=1, max_length=50)
    person1_last_name: str = Field(min_length=1, max_length=50)
    person2_first_name: str = Field(min_length=1, max_length=50)
    person2_last_name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: StrongPassword
    wedding_date: WeddingDate
    wedding_location: str = Field(min_length=3, max_length=100)
    wedding_theme: str = Field(min_length=2, max_length=50)
    estimated_budget: int = Field(ge=1000, le=1_000_000, description="Budget in dollars ($1,000-$1,000,000)")
    vendor_categories: Optional[List[VendorCategory]] = Field(None, min_length=1)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class EmailRequest(BaseModel):
    """Request carrying only an email (forgot password, resend verification)."""
    email: EmailStr


class VerifyEmailRequest(BaseModel):
    token: str = Field(min_length=1)


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1)
    password: StrongPassword


class UpdateProfileRequest(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""
    person1_first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    person1_last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    person2_first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    person2_last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    wedding_date: Optional[WeddingDate] = None
    wedding_location: Optional[str] = Field(None, min_length=3, max_length=100)
    wedding_theme: Optional[str] = Field(None, min_length=2, max_length=50)
    estimated_budget: Optional[int] = Field(None, ge=1000, le=1_000_000)
    vendor_categories: Optional[List[VendorCategory]] = None
    bio: Optional[str] = Field(None, max_length=500)
    allow_messages: Optional[bool] = None
    profile_visible: Optional[bool] = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8, description="At least 8 characters")


class CreateMatchRequest(BaseModel):
    """Request to contact another couple."""
    receiver_id: str = Field(min_length=1)
    message: str = Field(min_length=1, max_length=500, description="Initial message")


class MatchActionRequest(BaseModel):
    action: Literal['accept', 'decline']


class SendMessageRequest(BaseModel):
    content: str = Field(min_length=1, max_length=1000)
    receiver_id: str = Field(min_length=1)
    match_id: Optional[str] = Field(None, min_length=1)


class MarkReadRequest(BaseModel):
    message_ids: List[str] = Field(min_length=1)
