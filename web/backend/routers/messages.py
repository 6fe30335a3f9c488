#!/usr/bin/env python3
"""
Message endpoints - send messages, read conversations and track unread state.
"""

import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.models import User
from ..dependencies import get_db, get_current_user
from ..services.message_service import MessageService
from ..utils import validate_uuid
from ..models.requests import SendMessageRequest, MarkReadRequest
from ..models.responses import (
    MessageSentResponse,
    ConversationsResponse,
    MessagePageResponse,
    MarkReadResponse,
    UnreadCountResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.post("", response_model=MessageSentResponse, status_code=201)
def send_message(
    body: SendMessageRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    receiver_id = validate_uuid(body.receiver_id, "receiver_id")
    match_id = validate_uuid(body.match_id, "match_id") if body.match_id else None

    service = MessageService(db)
    message = service.send(user, receiver_id, body.content, match_id)

    return MessageSentResponse(success=True, message="Message sent successfully", data=message)


@router.get("/conversations", response_model=ConversationsResponse)
def get_conversations(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """
    One entry per pending or accepted match with its latest message and unread count.
    """
    service = MessageService(db)
    return ConversationsResponse(success=True, conversations=service.list_conversations(user))


@router.get("/conversation/{match_id}", response_model=MessagePageResponse)
def get_conversation(
    match_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=100),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """
    Page through a match's messages. Marks the caller's unread messages as read.
    """
    match_uuid = validate_uuid(match_id, "match_id")
    service = MessageService(db)
    messages, pagination = service.get_conversation(match_uuid, user, page, limit)
    return MessagePageResponse(success=True, messages=messages, pagination=pagination)


@router.get("/user/{user_id}", response_model=MessagePageResponse)
def get_user_history(
    user_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=100),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    other_id = validate_uuid(user_id, "user_id")
    service = MessageService(db)
    messages, pagination = service.get_user_history(user, other_id, page, limit)
    return MessagePageResponse(success=True, messages=messages, pagination=pagination)


@router.post("/read", response_model=MarkReadResponse)
def mark_messages_read(
    body: MarkReadRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    service = MessageService(db)
    count = service.mark_read(body.message_ids, user)
    return MarkReadResponse(success=True, message=f"{count} messages marked as read", count=count)


@router.put("/mark-conversation-read/{match_id}", response_model=MarkReadResponse)
def mark_conversation_read(
    match_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    match_uuid = validate_uuid(match_id, "match_id")
    service = MessageService(db)
    count = service.mark_conversation_read(match_uuid, user)
    return MarkReadResponse(success=True, message=f"{count} messages marked as read", count=count)


@router.get("/unread-count", response_model=UnreadCountResponse)
def get_unread_count(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    service = MessageService(db)
    return UnreadCountResponse(success=True, unread_count=service.unread_count(user))
