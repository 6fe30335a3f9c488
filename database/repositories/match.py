import logging
from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import select, update, or_, and_

from core.utils import utc_now
from database.models import Match, MatchStatus, make_pair_key
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class MatchRepository(BaseRepository):
    def get_match_by_id(self, match_id: Any) -> Optional[Match]:
        return self.db.get(Match, match_id)

    def get_between(self, user_a: Any, user_b: Any, status: Optional[MatchStatus] = None) -> Optional[Match]:
        """Match between two users in either direction."""
        stmt = select(Match).where(
            or_(
                and_(Match.initiator_id == user_a, Match.receiver_id == user_b),
                and_(Match.initiator_id == user_b, Match.receiver_id == user_a),
            )
        )
        if status is not None:
            stmt = stmt.where(Match.status == status)
        return self.db.execute(stmt).scalars().first()

    def create(self, initiator_id: Any, receiver_id: Any, **fields) -> Match:
        match = Match(
            initiator_id=initiator_id,
            receiver_id=receiver_id,
            pair_key=make_pair_key(initiator_id, receiver_id),
            status=MatchStatus.PENDING,
            **fields
        )
        self.db.add(match)
        self.db.flush()  # Raises IntegrityError if the pair already exists
        return match

    def get_matches_for_user(
        self,
        user_id: Any,
        statuses: Optional[List[MatchStatus]] = None
    ) -> List[Match]:
        stmt = select(Match).where(
            or_(Match.initiator_id == user_id, Match.receiver_id == user_id)
        )
        if statuses:
            stmt = stmt.where(Match.status.in_(statuses))
        stmt = stmt.order_by(Match.updated_at.desc())
        return list(self.db.execute(stmt).scalars().all())

    def transition_from_pending(self, match_id: Any, new_status: MatchStatus) -> bool:
        """
        Move a match out of PENDING.

        Conditional on the current status so concurrent responders cannot
        both succeed. Returns False if the match was no longer PENDING.
        """
        stmt = (
            update(Match)
            .where(Match.id == match_id, Match.status == MatchStatus.PENDING)
            .values(status=new_status, updated_at=utc_now())
            .execution_options(synchronize_session='evaluate')
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1

    def touch(self, match: Match) -> None:
        match.updated_at = utc_now()

    def expire_pending_before(self, cutoff: datetime) -> int:
        stmt = select(Match).where(
            Match.status == MatchStatus.PENDING,
            Match.updated_at < cutoff
        )
        matches = self.db.execute(stmt).scalars().all()

        count = 0
        for match in matches:
            match.status = MatchStatus.EXPIRED
            count += 1

        if count > 0:
            logger.info(f"Expired {count} pending matches not updated since {cutoff.isoformat()}")

        return count
