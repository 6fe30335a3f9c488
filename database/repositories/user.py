import logging
from datetime import date
from typing import Any, List, Optional

from sqlalchemy import select, func

from database.models import User
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository):
    def get_by_id(self, user_id: Any) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email.strip().lower())
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_reset_token(self, token: str) -> Optional[User]:
        stmt = select(User).where(User.password_reset_token == token)
        return self.db.execute(stmt).scalar_one_or_none()

    def email_exists(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email.strip().lower())
        return self.db.execute(stmt).first() is not None

    def create(self, **fields) -> User:
        user = User(**fields)
        self.db.add(user)
        self.db.flush()  # Generate ID
        return user

    def get_listed_user(self, user_id: Any) -> Optional[User]:
        """User whose profile is public: visible, completed and verified."""
        stmt = select(User).where(
            User.id == user_id,
            User.profile_visible.is_(True),
            User.profile_completed.is_(True),
            User.is_email_verified.is_(True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_contactable_user(self, user_id: Any) -> Optional[User]:
        """User who can receive a new match: visible, completed and accepting messages."""
        stmt = select(User).where(
            User.id == user_id,
            User.profile_visible.is_(True),
            User.profile_completed.is_(True),
            User.allow_messages.is_(True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_messageable_user(self, user_id: Any) -> Optional[User]:
        stmt = select(User).where(
            User.id == user_id,
            User.allow_messages.is_(True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def search_marketplace(
        self,
        exclude_user_id: Any,
        date_start: Optional[date] = None,
        date_end: Optional[date] = None,
        location: Optional[str] = None,
        theme: Optional[str] = None,
        budget_min: Optional[int] = None,
        budget_max: Optional[int] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[User]:
        """
        Listed users matching the column filters.

        Ordered by wedding date, then newest account first. Vendor category
        overlap is filtered by the caller since the list column is JSON.
        """
        stmt = self._marketplace_query(
            select(User), exclude_user_id, date_start, date_end,
            location, theme, budget_min, budget_max
        )
        stmt = stmt.order_by(User.wedding_date.asc(), User.created_at.desc())

        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def count_marketplace(
        self,
        exclude_user_id: Any,
        date_start: Optional[date] = None,
        date_end: Optional[date] = None,
        location: Optional[str] = None,
        theme: Optional[str] = None,
        budget_min: Optional[int] = None,
        budget_max: Optional[int] = None,
    ) -> int:
        stmt = self._marketplace_query(
            select(func.count(User.id)), exclude_user_id, date_start, date_end,
            location, theme, budget_min, budget_max
        )
        return self.db.execute(stmt).scalar_one()

    @staticmethod
    def _marketplace_query(stmt, exclude_user_id, date_start, date_end, location, theme, budget_min, budget_max):
        stmt = stmt.where(
            User.id != exclude_user_id,
            User.profile_visible.is_(True),
            User.profile_completed.is_(True),
            User.is_email_verified.is_(True)
        )

        if date_start is not None:
            stmt = stmt.where(User.wedding_date >= date_start)
        if date_end is not None:
            stmt = stmt.where(User.wedding_date <= date_end)
        if location:
            stmt = stmt.where(func.lower(User.wedding_location).contains(location.strip().lower()))
        if theme:
            stmt = stmt.where(func.lower(User.wedding_theme).contains(theme.strip().lower()))
        if budget_min is not None:
            stmt = stmt.where(User.estimated_budget >= budget_min)
        if budget_max is not None:
            stmt = stmt.where(User.estimated_budget <= budget_max)
        return stmt
