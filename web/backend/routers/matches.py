#!/usr/bin/env python3
"""
Match endpoints - contact couples and respond to match requests.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from database.models import User
from ..dependencies import get_db, get_app_config, get_current_user
from ..services.match_service import MatchService
from ..utils import validate_uuid
from ..models.requests import CreateMatchRequest, MatchActionRequest
from ..models.responses import (
    MatchRecordResponse,
    MatchesResponse,
    MatchDetailResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/matches", tags=["matches"])


def _match_service(request: Request, db: Session) -> MatchService:
    return MatchService(db, get_app_config(request).matching)


@router.post("", response_model=MatchRecordResponse, status_code=201)
def create_match(
    request: Request,
    body: CreateMatchRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """
    Send a match request with an initial message.

    Stores the compatibility score, shared vendor categories and estimated
    savings computed at creation time.
    """
    receiver_id = validate_uuid(body.receiver_id, "receiver_id")
    service = _match_service(request, db)
    match = service.create_match(user, receiver_id, body.message)

    return MatchRecordResponse(
        success=True,
        message="Match request sent successfully",
        match=match
    )


@router.get("", response_model=MatchesResponse)
def get_matches(
    request: Request,
    status: Optional[str] = Query(default=None, description="PENDING, ACCEPTED, DECLINED or EXPIRED"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """
    Get the caller's matches, most recently updated first.
    """
    service = _match_service(request, db)
    matches = service.list_matches(user, status)

    return MatchesResponse(
        success=True,
        count=len(matches),
        matches=matches
    )


@router.get("/{match_id}", response_model=MatchDetailResponse)
def get_match_details(
    match_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    match_uuid = validate_uuid(match_id, "match_id")
    service = _match_service(request, db)
    return MatchDetailResponse(success=True, match=service.get_match(match_uuid, user))


@router.put("/{match_id}/action", response_model=MatchRecordResponse)
def respond_to_match(
    match_id: str,
    request: Request,
    body: MatchActionRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """
    Accept or decline a pending match. Receiver only, once.
    """
    match_uuid = validate_uuid(match_id, "match_id")
    service = _match_service(request, db)
    match = service.respond(match_uuid, user, body.action)

    return MatchRecordResponse(
        success=True,
        message=f"Match {match.status.lower()} successfully",
        match=match
    )
