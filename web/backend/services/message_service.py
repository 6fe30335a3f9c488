#!/usr/bin/env python3
"""
Message service - who may message whom, conversation views and read state.

Sending is gated by match state:
- ACCEPTED: either participant may send.
- PENDING: only the initiator may send follow-ups until the receiver accepts.
- DECLINED / EXPIRED: nobody may send.
Without a match id, the pair must have an ACCEPTED match.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from database.models import Match, MatchStatus, User
from database.repository import Repositories
from ..models.responses import ConversationSummary, MessageDetail, Pagination
from ..utils import safe_datetime_iso, page_bounds, build_pagination, validate_uuid
from ..exceptions import ForbiddenException, NotFoundException, ValidationException
from .serializers import to_user_summary, to_message_detail

logger = logging.getLogger(__name__)

CLOSED_STATUSES = (MatchStatus.DECLINED, MatchStatus.EXPIRED)
ACTIVE_STATUSES = [MatchStatus.PENDING, MatchStatus.ACCEPTED]


class MessageService:
    """Service for sending and reading messages between matched couples."""

    def __init__(self, db: Session):
        self.db = db
        self.repos = Repositories(db)

    def send(self, sender: User, receiver_id, content: str, match_id=None) -> MessageDetail:
        """
        Send a message, checking the sender's rights against the match state.

        Raises:
            ValidationException: Messaging yourself, or receiver is not the other participant.
            NotFoundException: Receiver missing or not accepting messages; match missing.
            ForbiddenException: Sender not a participant, or match state forbids sending.
        """
        if receiver_id == sender.id:
            raise ValidationException("Cannot send a message to yourself")

        receiver = self.repos.users.get_messageable_user(receiver_id)
        if not receiver:
            raise NotFoundException("Receiver not found or not accepting messages")

        if match_id is not None:
            match = self.repos.matches.get_match_by_id(match_id)
            if not match:
                raise NotFoundException("Match not found")
            self._check_can_send_in_match(match, sender, receiver)
        else:
            match = self.repos.matches.get_between(sender.id, receiver.id, status=MatchStatus.ACCEPTED)
            if not match:
                raise ForbiddenException("You can only message couples you have an accepted match with")
            # Unscoped messages are not attached to the match
            match = None

        message = self.repos.messages.create(
            sender_id=sender.id,
            receiver_id=receiver.id,
            content=content,
            match_id=match.id if match else None
        )
        if match is not None:
            # Conversation ordering follows match activity
            self.repos.matches.touch(match)

        self.db.commit()
        logger.info(f"Message {message.id} sent {sender.id} -> {receiver.id}")
        return to_message_detail(message)

    def _check_can_send_in_match(self, match: Match, sender: User, receiver: User) -> None:
        if not match.involves(sender.id):
            raise ForbiddenException("Not authorized to send messages in this match")

        if match.other_participant(sender.id) != receiver.id:
            raise ValidationException("Receiver is not part of this match")

        if match.status in CLOSED_STATUSES:
            raise ForbiddenException(f"Cannot send messages in a {match.status.value.lower()} match")

        if match.status == MatchStatus.PENDING and match.initiator_id != sender.id:
            raise ForbiddenException("Accept the match before replying")

    def list_conversations(self, user: User) -> List[ConversationSummary]:
        """One entry per PENDING or ACCEPTED match, most recent activity first."""
        matches = self.repos.matches.get_matches_for_user(user.id, ACTIVE_STATUSES)

        conversations = []
        for match in matches:
            other = match.receiver if match.initiator_id == user.id else match.initiator
            latest = self.repos.messages.get_latest_for_match(match.id)
            conversations.append(ConversationSummary(
                id=str(match.id),
                status=match.status.value,
                other_user=to_user_summary(other),
                last_message=to_message_detail(latest) if latest else None,
                unread_count=self.repos.messages.count_unread_for_match(match.id, user.id),
                updated_at=safe_datetime_iso(match.updated_at)
            ))
        return conversations

    def get_conversation(
        self,
        match_id,
        user: User,
        page: int = 1,
        limit: int = 50
    ) -> Tuple[List[MessageDetail], Pagination]:
        """
        A page of a match's messages, oldest first within the page.

        Marks the caller's unread messages in the match as read.

        Raises:
            NotFoundException: Match does not exist.
            ForbiddenException: Caller is not a participant.
        """
        match = self._get_participant_match(match_id, user)

        marked = self.repos.messages.mark_read_for_match(match.id, user.id)
        self.db.commit()
        if marked:
            logger.debug(f"Marked {marked} messages read in match {match.id} for {user.id}")

        offset, limit = page_bounds(page, limit)
        messages, total = self.repos.messages.page_for_match(match.id, offset, limit)
        # Fetched newest first so pages count back from the latest message
        messages.reverse()

        return [to_message_detail(m) for m in messages], build_pagination(page, limit, total)

    def get_user_history(
        self,
        user: User,
        other_user_id,
        page: int = 1,
        limit: int = 50
    ) -> Tuple[List[MessageDetail], Pagination]:
        """
        Messages exchanged with another couple, regardless of match.

        Raises:
            ValidationException: other_user_id is the caller.
            NotFoundException: The pair has never matched.
        """
        if other_user_id == user.id:
            raise ValidationException("Cannot view a conversation with yourself")

        if not self.repos.matches.get_between(user.id, other_user_id):
            raise NotFoundException("No conversation found with this user")

        offset, limit = page_bounds(page, limit)
        messages, total = self.repos.messages.page_between_users(user.id, other_user_id, offset, limit)
        messages.reverse()

        return [to_message_detail(m) for m in messages], build_pagination(page, limit, total)

    def mark_read(self, message_ids: List[str], user: User) -> int:
        """Mark messages addressed to the caller as read. Returns the number changed."""
        ids = [validate_uuid(mid, "message_id") for mid in message_ids]
        count = self.repos.messages.mark_read(ids, user.id)
        self.db.commit()
        return count

    def mark_conversation_read(self, match_id, user: User) -> int:
        """
        Raises:
            NotFoundException: Match does not exist.
            ForbiddenException: Caller is not a participant.
        """
        match = self._get_participant_match(match_id, user)
        count = self.repos.messages.mark_read_for_match(match.id, user.id)
        self.db.commit()
        return count

    def unread_count(self, user: User) -> int:
        return self.repos.messages.count_unread(user.id)

    def _get_participant_match(self, match_id, user: User) -> Match:
        match: Optional[Match] = self.repos.matches.get_match_by_id(match_id)
        if not match:
            raise NotFoundException("Conversation not found")
        if not match.involves(user.id):
            raise ForbiddenException("Not authorized to view this conversation")
        return match
