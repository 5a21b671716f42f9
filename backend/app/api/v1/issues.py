"""
Issues API endpoints.

Citizen-facing reads and writes: radius search, report submission,
status updates, and flagging.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.api.deps import get_current_user, require_admin, require_user
from app.config import get_settings
from app.core.exceptions import InvalidArgumentError
from app.core.geo import GeoPoint
from app.db.session import get_db
from app.models.issue import Issue
from app.models.user import User
from app.schemas.common import Pagination
from app.schemas.flag import FlagCreate, FlagResponse
from app.schemas.vote import VoteCreate, VoteResponse
from app.schemas.issue import (
    IssueCreate, IssueCreated, IssueDetail, IssueList, IssueStats,
    StatusUpdate, StatusUpdateResponse,
)
from app.services import issue_service, moderation_service, vote_service

router = APIRouter()


def issue_to_dict(issue: Issue, distance: Optional[float] = None) -> dict:
    """Convert Issue model to dictionary for JSON response."""
    return {
        "id": issue.id,
        "title": issue.title,
        "description": issue.description,
        "category": issue.category,
        "status": issue.status,
        "location": {
            "latitude": float(issue.latitude),
            "longitude": float(issue.longitude),
            "address": issue.address,
        },
        "reporter_id": None if issue.is_anonymous else issue.reporter_id,
        "reporter_name": issue.reporter_name,
        "flag_count": issue.flag_count,
        "upvotes": issue.upvotes,
        "downvotes": issue.downvotes,
        "created_at": issue.created_at,
        "updated_at": issue.updated_at,
        "distance": round(distance, 3) if distance is not None else None,
    }


def issue_detail_to_dict(issue: Issue) -> dict:
    data = issue_to_dict(issue)
    data["status_logs"] = [
        {
            "id": log.id,
            "status": log.status,
            "comment": log.comment,
            "updated_by_name": log.updated_by_name,
            "created_at": log.created_at,
        }
        for log in issue.status_logs
    ]
    return data


@router.get("", response_model=IssueList)
async def list_issues(
    db: Session = Depends(get_db),
    latitude: Optional[float] = Query(None, ge=-90, le=90, description="Search center latitude"),
    longitude: Optional[float] = Query(None, ge=-180, le=180, description="Search center longitude"),
    radius: Optional[float] = Query(None, description="Search radius in km"),
    category: Optional[str] = Query(None, description="Category or 'all'"),
    status: Optional[str] = Query(None, description="Status or 'all'"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
):
    """
    List visible issues.

    With latitude/longitude, only issues within `radius` km are returned,
    nearest first, each annotated with its distance.
    """
    if (latitude is None) != (longitude is None):
        raise InvalidArgumentError("latitude and longitude must be provided together")

    center = GeoPoint(latitude, longitude) if latitude is not None else None
    hits, total = issue_service.list_visible_issues(
        db,
        center=center,
        radius_km=radius,
        category=category,
        status=status,
        page=page,
        limit=limit,
    )

    page_size = limit or get_settings().default_page_size
    return {
        "items": [issue_to_dict(h.issue, h.distance) for h in hits],
        "pagination": Pagination.build(page, page_size, total),
    }


@router.get("/stats/overview", response_model=IssueStats)
async def get_issue_stats(db: Session = Depends(get_db)):
    """Issue counts by status and by category."""
    return issue_service.get_issue_stats(db)


@router.get("/{issue_id}", response_model=IssueDetail)
async def get_issue(issue_id: str, db: Session = Depends(get_db)):
    """Get a visible issue with its status history."""
    issue = issue_service.get_issue(db, issue_id)
    return issue_detail_to_dict(issue)


@router.post("", response_model=IssueCreated, status_code=201)
async def create_issue(
    payload: IssueCreate,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
):
    """Report a new issue. Anonymous submissions allowed."""
    issue = issue_service.create_issue(
        db,
        title=payload.title,
        description=payload.description,
        category=payload.category,
        latitude=payload.location.latitude,
        longitude=payload.location.longitude,
        address=payload.location.address,
        reporter=user,
        is_anonymous=payload.is_anonymous,
    )
    return {
        "message": "Issue created successfully",
        "issue": issue_detail_to_dict(issue),
    }


@router.put("/{issue_id}/status", response_model=StatusUpdateResponse)
async def update_issue_status(
    issue_id: str,
    payload: StatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Change an issue's status (admin)."""
    issue = issue_service.update_issue_status(
        db, issue_id, payload.status, admin, comment=payload.comment
    )
    return {"message": "Issue status updated successfully", "status": issue.status}


@router.post("/{issue_id}/flag", response_model=FlagResponse)
async def flag_issue(
    issue_id: str,
    payload: Optional[FlagCreate] = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    """Flag an issue as inappropriate. Enough flags hide it."""
    result = moderation_service.submit_flag(
        db, issue_id, user.id, reason=payload.reason if payload else None
    )
    return {
        "success": result.success,
        "message": "Issue flagged successfully",
        "flag_count": result.flag_count,
        "is_hidden": result.is_hidden,
    }


@router.post("/{issue_id}/vote", response_model=VoteResponse)
async def vote_issue(
    issue_id: str,
    payload: VoteCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    """Upvote or downvote an issue. Repeating a vote withdraws it."""
    result = vote_service.cast_vote(db, issue_id, user.id, payload.type)
    return {
        "message": f"Vote {result.action} successfully",
        "action": result.action,
        "vote_type": result.vote_type,
        "upvotes": result.upvotes,
        "downvotes": result.downvotes,
    }
