#!/usr/bin/env python3
"""
User endpoints - own profile, profile picture, marketplace and public profiles.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from sqlalchemy.orm import Session

from database.models import User, VendorCategory
from ..dependencies import get_db, get_app_config, get_current_user
from ..services.user_service import UserService
from ..exceptions import ValidationException
from ..utils import validate_uuid, parse_date
from ..models.requests import UpdateProfileRequest, ChangePasswordRequest
from ..models.responses import (
    ProfileResponse,
    PublicProfileResponse,
    MarketplaceResponse,
    MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


def _user_service(request: Request, db: Session) -> UserService:
    return UserService(db, get_app_config(request), request.app.state.storage_service)


def parse_vendor_categories(value: Optional[str]) -> Optional[list]:
    """Comma-separated category names to a list of category values."""
    if not value:
        return None

    categories = []
    for raw in value.split(','):
        name = raw.strip().upper()
        if not name:
            continue
        try:
            categories.append(VendorCategory(name).value)
        except ValueError:
            raise ValidationException(f"Invalid vendor category: {raw.strip()}")
    return categories or None


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    service = _user_service(request, db)
    return ProfileResponse(success=True, user=service.get_profile(user))


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    request: Request,
    body: UpdateProfileRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    service = _user_service(request, db)
    profile = service.update_profile(user, body)
    return ProfileResponse(success=True, message="Profile updated successfully", user=profile)


@router.post("/profile/upload-picture", response_model=ProfileResponse)
def upload_profile_picture(
    request: Request,
    file: UploadFile = File(..., description="Image file (max 5MB)"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Upload or replace the profile picture."""
    max_bytes = get_app_config(request).storage.max_upload_bytes
    # One byte past the limit is enough to reject oversized files
    content = file.file.read(max_bytes + 1)

    service = _user_service(request, db)
    profile = service.upload_profile_picture(user, content, file.content_type)
    return ProfileResponse(success=True, message="Profile picture uploaded successfully", user=profile)


@router.delete("/profile/remove-picture", response_model=ProfileResponse)
def remove_profile_picture(
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    service = _user_service(request, db)
    profile = service.remove_profile_picture(user)
    return ProfileResponse(success=True, message="Profile picture removed successfully", user=profile)


@router.put("/profile/change-password", response_model=MessageResponse)
def change_password(
    request: Request,
    body: ChangePasswordRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    service = _user_service(request, db)
    service.change_password(user, body.current_password, body.new_password)
    return MessageResponse(success=True, message="Password changed successfully")


@router.get("/marketplace", response_model=MarketplaceResponse)
def get_marketplace(
    request: Request,
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1, le=50, description="Page size (default 20)"),
    wedding_date_start: Optional[str] = Query(default=None, description="YYYY-MM-DD"),
    wedding_date_end: Optional[str] = Query(default=None, description="YYYY-MM-DD"),
    location: Optional[str] = Query(default=None),
    theme: Optional[str] = Query(default=None),
    budget_min: Optional[int] = Query(default=None, ge=0),
    budget_max: Optional[int] = Query(default=None, ge=0),
    vendor_categories: Optional[str] = Query(default=None, description="Comma-separated categories"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """
    Browse other couples.

    Defaults to weddings within about six months of the caller's date.
    Each result carries its compatibility score; pages are sorted by it.
    """
    service = _user_service(request, db)
    users, pagination = service.search_marketplace(
        user,
        page=page,
        limit=limit,
        wedding_date_start=parse_date(wedding_date_start, "wedding_date_start"),
        wedding_date_end=parse_date(wedding_date_end, "wedding_date_end"),
        location=location,
        theme=theme,
        budget_min=budget_min,
        budget_max=budget_max,
        vendor_categories=parse_vendor_categories(vendor_categories)
    )
    return MarketplaceResponse(success=True, users=users, pagination=pagination)


@router.get("/{user_id}", response_model=PublicProfileResponse)
def get_public_profile(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    target_id = validate_uuid(user_id, "user_id")
    service = _user_service(request, db)
    return PublicProfileResponse(success=True, user=service.get_public_profile(user, target_id))
