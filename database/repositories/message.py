import logging
from typing import Any, List, Optional, Tuple

from sqlalchemy import select, update, func, or_, and_

from database.models import Message
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class MessageRepository(BaseRepository):
    def create(self, sender_id: Any, receiver_id: Any, content: str, match_id: Any = None) -> Message:
        message = Message(
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            match_id=match_id,
        )
        self.db.add(message)
        self.db.flush()
        return message

    def get_latest_for_match(self, match_id: Any) -> Optional[Message]:
        stmt = (
            select(Message)
            .where(Message.match_id == match_id)
            .order_by(Message.created_at.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalars().first()

    def count_unread_for_match(self, match_id: Any, receiver_id: Any) -> int:
        stmt = select(func.count(Message.id)).where(
            Message.match_id == match_id,
            Message.receiver_id == receiver_id,
            Message.is_read.is_(False)
        )
        return self.db.execute(stmt).scalar_one()

    def count_unread(self, receiver_id: Any) -> int:
        stmt = select(func.count(Message.id)).where(
            Message.receiver_id == receiver_id,
            Message.is_read.is_(False)
        )
        return self.db.execute(stmt).scalar_one()

    def page_for_match(self, match_id: Any, offset: int, limit: int) -> Tuple[List[Message], int]:
        """Newest-first page of a match's messages plus the total count."""
        condition = Message.match_id == match_id
        return self._page(condition, offset, limit)

    def page_between_users(self, user_a: Any, user_b: Any, offset: int, limit: int) -> Tuple[List[Message], int]:
        condition = or_(
            and_(Message.sender_id == user_a, Message.receiver_id == user_b),
            and_(Message.sender_id == user_b, Message.receiver_id == user_a),
        )
        return self._page(condition, offset, limit)

    def _page(self, condition, offset: int, limit: int) -> Tuple[List[Message], int]:
        stmt = (
            select(Message)
            .where(condition)
            .order_by(Message.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        messages = list(self.db.execute(stmt).scalars().all())
        total = self.db.execute(select(func.count(Message.id)).where(condition)).scalar_one()
        return messages, total

    def mark_read_for_match(self, match_id: Any, receiver_id: Any) -> int:
        stmt = (
            update(Message)
            .where(
                Message.match_id == match_id,
                Message.receiver_id == receiver_id,
                Message.is_read.is_(False)
            )
            .values(is_read=True)
            .execution_options(synchronize_session='evaluate')
        )
        return self.db.execute(stmt).rowcount

    def mark_read(self, message_ids: List[Any], receiver_id: Any) -> int:
        if not message_ids:
            return 0

        stmt = (
            update(Message)
            .where(
                Message.id.in_(message_ids),
                Message.receiver_id == receiver_id,
                Message.is_read.is_(False)
            )
            .values(is_read=True)
            .execution_options(synchronize_session='evaluate')
        )
        return self.db.execute(stmt).rowcount
