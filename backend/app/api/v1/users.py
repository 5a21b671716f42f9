"""
Users API - the requesting user's own reports.

Unlike the public listing, a reporter sees their hidden issues too.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import require_user
from app.api.v1.issues import issue_to_dict
from app.db.session import get_db
from app.models.user import User
from app.schemas.common import Pagination
from app.schemas.user import OwnIssueList, OwnStats
from app.services import issue_service

router = APIRouter()


@router.get("/issues", response_model=OwnIssueList)
async def list_my_issues(
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
):
    """Issues reported by the caller, newest first."""
    issues, total = issue_service.list_reporter_issues(db, user, page=page, limit=limit)
    return {
        "issues": [{**issue_to_dict(i), "is_hidden": i.is_hidden} for i in issues],
        "pagination": Pagination.build(page, limit, total),
    }


@router.get("/stats", response_model=OwnStats)
async def get_my_stats(
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    """The caller's issue counts by status and by category."""
    return issue_service.get_reporter_stats(db, user)
