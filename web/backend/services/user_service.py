#!/usr/bin/env python3
"""
User service - own profile, profile pictures and the couples marketplace.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from core.config_loader import AppConfig
from core.scorer import WeddingProfile, calculate_compatibility
from core.security import hash_password, verify_password
from database.models import User
from database.repository import Repositories
from ..models.requests import UpdateProfileRequest
from ..models.responses import PrivateProfile, PublicProfile, Pagination
from ..utils import page_bounds, build_pagination
from ..exceptions import NotFoundException, ValidationException
from .serializers import to_private_profile, to_public_profile
from .storage_service import StorageService

logger = logging.getLogger(__name__)

REQUIRED_PROFILE_FIELDS = (
    'person1_first_name',
    'person1_last_name',
    'person2_first_name',
    'person2_last_name',
    'wedding_date',
    'wedding_location',
    'wedding_theme',
    'estimated_budget',
)

# Columns a profile update may clear
NULLABLE_PROFILE_FIELDS = {'bio'}


def is_profile_complete(user: User) -> bool:
    return all(getattr(user, field) for field in REQUIRED_PROFILE_FIELDS)


class UserService:
    """Service for profile management and marketplace search."""

    def __init__(self, db: Session, config: AppConfig, storage: Optional[StorageService] = None):
        self.db = db
        self.repos = Repositories(db)
        self.config = config
        self.storage = storage or StorageService(config.storage)

    def get_profile(self, user: User) -> PrivateProfile:
        return to_private_profile(user)

    def update_profile(self, user: User, request: UpdateProfileRequest) -> PrivateProfile:
        """Apply the fields present in the request and recompute completeness."""
        updates = request.model_dump(exclude_unset=True)

        for field, value in updates.items():
            if value is None and field not in NULLABLE_PROFILE_FIELDS:
                continue
            if field == 'vendor_categories':
                value = [getattr(c, 'value', c) for c in value]
            elif isinstance(value, str) and field != 'bio':
                value = value.strip()
            setattr(user, field, value)

        user.profile_completed = is_profile_complete(user)
        self.db.commit()

        logger.info(f"User {user.id} updated profile fields: {sorted(updates)}")
        return to_private_profile(user)

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        """
        Raises:
            ValidationException: Current password does not verify.
        """
        if not verify_password(current_password, user.password_hash):
            raise ValidationException("Current password is incorrect")

        user.password_hash = hash_password(new_password, self.config.auth.bcrypt_rounds)
        self.db.commit()
        logger.info(f"User {user.id} changed their password")

    def upload_profile_picture(self, user: User, content: bytes, content_type: Optional[str]) -> PrivateProfile:
        """
        Store a new picture and point the profile at it.

        The previous picture is deleted after the record is updated; a failed
        delete is logged by the storage service and does not fail the upload.
        """
        url = self.storage.save_profile_picture(user.id, content, content_type)

        previous = user.profile_picture
        user.profile_picture = url
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            self.storage.delete(url)
            raise

        if previous:
            self.storage.delete(previous)

        return to_private_profile(user)

    def remove_profile_picture(self, user: User) -> PrivateProfile:
        """
        Raises:
            ValidationException: The profile has no picture.
        """
        previous = user.profile_picture
        if not previous:
            raise ValidationException("No profile picture to remove")

        user.profile_picture = None
        self.db.commit()

        self.storage.delete(previous)
        return to_private_profile(user)

    def get_public_profile(self, viewer: User, user_id) -> PublicProfile:
        """
        Another couple's profile with their compatibility against the viewer.

        Raises:
            ValidationException: user_id is the viewer's own id.
            NotFoundException: Profile hidden, incomplete, unverified or missing.
        """
        if user_id == viewer.id:
            raise ValidationException("Use /api/users/profile to view your own profile")

        target = self.repos.users.get_listed_user(user_id)
        if not target:
            raise NotFoundException("User not found")

        return to_public_profile(target, self._score(viewer, target))

    def search_marketplace(
        self,
        viewer: User,
        page: int = 1,
        limit: Optional[int] = None,
        wedding_date_start: Optional[date] = None,
        wedding_date_end: Optional[date] = None,
        location: Optional[str] = None,
        theme: Optional[str] = None,
        budget_min: Optional[int] = None,
        budget_max: Optional[int] = None,
        vendor_categories: Optional[List[str]] = None
    ) -> Tuple[List[PublicProfile], Pagination]:
        """
        Listed couples matching the filters, scored against the viewer.

        Without a date filter the search covers a window around the viewer's
        own wedding date. Results are paged in wedding date order, then each
        page is sorted by compatibility, best first.
        """
        settings = self.config.marketplace
        limit = min(limit or settings.default_page_size, settings.max_page_size)

        if wedding_date_start is None and wedding_date_end is None and viewer.wedding_date:
            window = timedelta(days=settings.default_window_days)
            wedding_date_start = viewer.wedding_date - window
            wedding_date_end = viewer.wedding_date + window

        filters = dict(
            exclude_user_id=viewer.id,
            date_start=wedding_date_start,
            date_end=wedding_date_end,
            location=location,
            theme=theme,
            budget_min=budget_min,
            budget_max=budget_max
        )
        offset, limit = page_bounds(page, limit)

        if vendor_categories:
            # Category overlap can only be checked in Python, so page after filtering
            wanted = set(vendor_categories)
            candidates = [
                u for u in self.repos.users.search_marketplace(**filters)
                if wanted.intersection(u.vendor_categories or [])
            ]
            total = len(candidates)
            page_users = candidates[offset:offset + limit]
        else:
            total = self.repos.users.count_marketplace(**filters)
            page_users = self.repos.users.search_marketplace(**filters, offset=offset, limit=limit)

        profiles = [to_public_profile(u, self._score(viewer, u)) for u in page_users]
        profiles.sort(key=lambda p: p.compatibility_score or 0, reverse=True)

        return profiles, build_pagination(page, limit, total)

    def _score(self, viewer: User, other: User) -> int:
        return calculate_compatibility(
            WeddingProfile.from_user(viewer),
            WeddingProfile.from_user(other),
            self.config.matching.weights
        )
