#!/usr/bin/env python3
"""
Match service - lifecycle of cost-sharing matches between couples.

A match is created PENDING by the initiator together with its first
message. Only the receiver may respond, exactly once, moving it to
ACCEPTED or DECLINED. Stale PENDING matches are moved to EXPIRED by
expire_stale_matches().
"""

import logging
from datetime import timedelta
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.config_loader import MatchingConfig
from core.scorer import (
    WeddingProfile,
    calculate_compatibility,
    estimate_savings,
    shared_vendor_categories
)
from core.utils import utc_now
from database.models import Match, MatchStatus, User
from database.repository import Repositories
from ..models.responses import MatchRecord, MatchView
from ..utils import safe_datetime_iso
from ..exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException
)
from .serializers import to_public_profile, to_message_summary

logger = logging.getLogger(__name__)

ACTION_TO_STATUS = {
    'accept': MatchStatus.ACCEPTED,
    'decline': MatchStatus.DECLINED,
}


def parse_status_filter(status: Optional[str]) -> Optional[List[MatchStatus]]:
    """Status query value to a filter list; unknown values mean no filter."""
    if not status:
        return None
    try:
        return [MatchStatus(status.strip().upper())]
    except ValueError:
        logger.debug(f"Ignoring unknown match status filter: {status}")
        return None


class MatchService:
    """Service for creating, listing and responding to matches."""

    def __init__(self, db: Session, matching: Optional[MatchingConfig] = None):
        self.db = db
        self.repos = Repositories(db)
        self.matching = matching or MatchingConfig()

    def create_match(self, initiator: User, receiver_id, message: str) -> MatchRecord:
        """
        Contact another couple.

        Args:
            initiator: The calling user.
            receiver_id: UUID of the couple being contacted.
            message: Text of the initial message.

        Returns:
            The new PENDING match with both profiles embedded.

        Raises:
            ValidationException: Initiator and receiver are the same user.
            NotFoundException: Receiver missing, hidden, incomplete or not accepting messages.
            ConflictException: A match already exists between the pair, in either direction.
        """
        if receiver_id == initiator.id:
            raise ValidationException("Cannot create a match with yourself")

        receiver = self.repos.users.get_contactable_user(receiver_id)
        if not receiver:
            raise NotFoundException("User not found or not available for matching")

        if self.repos.matches.get_between(initiator.id, receiver.id):
            raise ConflictException("Match already exists between these users")

        initiator_profile = WeddingProfile.from_user(initiator)
        receiver_profile = WeddingProfile.from_user(receiver)
        shared = shared_vendor_categories(
            initiator_profile.vendor_categories,
            receiver_profile.vendor_categories
        )
        score = calculate_compatibility(initiator_profile, receiver_profile, self.matching.weights)
        savings = estimate_savings(initiator.estimated_budget, len(shared), self.matching)

        try:
            match = self.repos.matches.create(
                initiator.id,
                receiver.id,
                compatibility_score=score,
                shared_vendor_categories=shared,
                estimated_savings=savings
            )
            self.repos.messages.create(
                sender_id=initiator.id,
                receiver_id=receiver.id,
                content=message,
                match_id=match.id
            )
            self.db.commit()
        except IntegrityError:
            # A concurrent create for the same pair won the race
            self.db.rollback()
            raise ConflictException("Match already exists between these users")

        logger.info(f"Match {match.id} created: {initiator.id} -> {receiver.id} (score {score})")
        return self._to_match_record(match)

    def list_matches(self, user: User, status: Optional[str] = None) -> List[MatchView]:
        """
        All matches the user takes part in, most recently updated first.

        Args:
            user: The calling user.
            status: Optional status name, case-insensitive. Unknown values are ignored.
        """
        matches = self.repos.matches.get_matches_for_user(user.id, parse_status_filter(status))
        return [self._to_match_view(m, user, include_last_message=True) for m in matches]

    def respond(self, match_id, user: User, action: str) -> MatchRecord:
        """
        Accept or decline a PENDING match as its receiver.

        Raises:
            ValidationException: Unknown action.
            NotFoundException: Match does not exist.
            ForbiddenException: Caller is not the receiver.
            ConflictException: Match is no longer PENDING.
        """
        new_status = ACTION_TO_STATUS.get(action)
        if new_status is None:
            raise ValidationException(f"Invalid action: {action}. Must be 'accept' or 'decline'.")

        match = self._get_match(match_id)

        if match.receiver_id != user.id:
            raise ForbiddenException("Only the receiver can respond to this match")

        if match.status != MatchStatus.PENDING:
            raise ConflictException("Match has already been responded to")

        if not self.repos.matches.transition_from_pending(match.id, new_status):
            self.db.rollback()
            raise ConflictException("Match has already been responded to")

        self.db.commit()
        self.db.refresh(match)

        logger.info(f"Match {match.id} {new_status.value.lower()} by {user.id}")
        return self._to_match_record(match)

    def get_match(self, match_id, user: User) -> MatchView:
        """
        Raises:
            NotFoundException: Match does not exist.
            ForbiddenException: Caller is not a participant.
        """
        match = self._get_match(match_id)
        if not match.involves(user.id):
            raise ForbiddenException("Not authorized to view this match")
        return self._to_match_view(match, user, include_last_message=True)

    def expire_stale_matches(self, older_than_days: Optional[int] = None) -> int:
        """
        Move PENDING matches with no activity since the cutoff to EXPIRED.

        Returns:
            Number of matches expired.
        """
        days = older_than_days if older_than_days is not None else self.matching.pending_expiry_days
        cutoff = utc_now() - timedelta(days=days)
        count = self.repos.matches.expire_pending_before(cutoff)
        self.db.commit()
        return count

    def _get_match(self, match_id) -> Match:
        match = self.repos.matches.get_match_by_id(match_id)
        if not match:
            raise NotFoundException("Match not found")
        return match

    def _to_match_record(self, match: Match) -> MatchRecord:
        return MatchRecord(
            id=str(match.id),
            status=match.status.value,
            initiator_id=str(match.initiator_id),
            receiver_id=str(match.receiver_id),
            initiator=to_public_profile(match.initiator) if match.initiator else None,
            receiver=to_public_profile(match.receiver) if match.receiver else None,
            compatibility_score=match.compatibility_score,
            shared_vendor_categories=list(match.shared_vendor_categories or []),
            estimated_savings=match.estimated_savings,
            created_at=safe_datetime_iso(match.created_at),
            updated_at=safe_datetime_iso(match.updated_at)
        )

    def _to_match_view(self, match: Match, user: User, include_last_message: bool = False) -> MatchView:
        is_initiator = match.initiator_id == user.id
        other = match.receiver if is_initiator else match.initiator

        last_message = None
        if include_last_message:
            latest = self.repos.messages.get_latest_for_match(match.id)
            if latest:
                last_message = to_message_summary(latest)

        return MatchView(
            id=str(match.id),
            status=match.status.value,
            is_initiator=is_initiator,
            other_user=to_public_profile(other),
            compatibility_score=match.compatibility_score,
            shared_vendor_categories=list(match.shared_vendor_categories or []),
            estimated_savings=match.estimated_savings,
            last_message=last_message,
            created_at=safe_datetime_iso(match.created_at),
            updated_at=safe_datetime_iso(match.updated_at)
        )
