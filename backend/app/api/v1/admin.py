"""
Admin API - moderation and analytics.

All endpoints require an admin identity.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.api.deps import require_admin
from app.api.v1.issues import issue_to_dict
from app.db.session import get_db
from app.models.issue import Issue
from app.models.user import User
from app.schemas.admin import (
    AdminIssueList, Dashboard, FlaggedIssueList, VisibilityResponse, VisibilityUpdate,
)
from app.schemas.common import Pagination
from app.services import dashboard_service, issue_service, moderation_service

router = APIRouter()


def flagged_issue_to_dict(issue: Issue) -> dict:
    data = issue_to_dict(issue)
    data["is_hidden"] = issue.is_hidden
    data["flags"] = [
        {
            "id": flag.id,
            "flagged_by": flag.flagged_by,
            "user_name": flag.user.name if flag.user else None,
            "reason": flag.reason,
            "created_at": flag.created_at,
        }
        for flag in issue.flags
    ]
    return data


@router.get("/dashboard", response_model=Dashboard)
async def get_dashboard(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Overview, user and category stats, top flagged issues, recent activity."""
    data = dashboard_service.get_dashboard(db)
    return {
        "overview": data["overview"],
        "users": data["users"],
        "categories": data["categories"],
        "flagged_issues": [flagged_issue_to_dict(i) for i in data["flagged_issues"]],
        "recent_activity": [
            {
                "id": log.id,
                "issue_id": log.issue_id,
                "issue_title": log.issue.title if log.issue else None,
                "status": log.status,
                "comment": log.comment,
                "updated_by_name": log.updated_by_name,
                "created_at": log.created_at,
            }
            for log in data["recent_activity"]
        ],
    }


@router.get("/flagged-issues", response_model=FlaggedIssueList)
async def list_flagged_issues(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
):
    """Issues with at least one flag, most flagged first, with flag details."""
    issues, total = moderation_service.list_flagged_issues(db, page=page, limit=limit)
    return {
        "items": [flagged_issue_to_dict(i) for i in issues],
        "pagination": Pagination.build(page, limit, total),
    }


@router.get("/issues", response_model=AdminIssueList)
async def list_all_issues(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
    category: Optional[str] = Query(None, description="Category or 'all'"),
    status: Optional[str] = Query(None, description="Status or 'all'"),
    flagged: bool = Query(False, description="Only issues with at least one flag"),
    hidden: Optional[bool] = Query(None, description="Restrict to hidden or visible issues"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
):
    """All issues, hidden ones included, newest first."""
    issues, total = issue_service.list_all_issues(
        db, admin, category=category, status=status, flagged=flagged, hidden=hidden,
        page=page, limit=limit,
    )
    return {
        "items": [{**issue_to_dict(i), "is_hidden": i.is_hidden} for i in issues],
        "pagination": Pagination.build(page, limit, total),
    }

@router.put("/issues/{issue_id}/visibility", response_model=VisibilityResponse)
async def set_issue_visibility(
    issue_id: str,
    payload: VisibilityUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Hide an issue, or restore one that was auto-hidden."""
    issue = moderation_service.set_issue_visibility(db, issue_id, payload.is_hidden, admin)
    return {
        "message": f"Issue {'hidden' if issue.is_hidden else 'unhidden'} successfully",
        "is_hidden": issue.is_hidden,
    }
