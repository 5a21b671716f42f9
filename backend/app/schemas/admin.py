"""Admin schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.schemas.common import Pagination
from app.schemas.flag import FlagDetail
from app.schemas.issue import CategoryStats, Issue, StatusOverview


class VisibilityUpdate(BaseModel):
    is_hidden: bool


class VisibilityResponse(BaseModel):
    message: str
    is_hidden: bool


class FlaggedIssue(Issue):
    is_hidden: bool
    flags: list[FlagDetail] = []


class FlaggedIssueList(BaseModel):
    items: list[FlaggedIssue]
    pagination: Pagination


class AdminIssue(Issue):
    is_hidden: bool


class AdminIssueList(BaseModel):
    items: list[AdminIssue]
    pagination: Pagination


class UserStats(BaseModel):
    total_users: int = 0
    admin_users: int = 0
    banned_users: int = 0


class RecentActivity(BaseModel):
    id: str
    issue_id: str
    issue_title: Optional[str] = None
    status: str
    comment: Optional[str] = None
    updated_by_name: str
    created_at: datetime


class Dashboard(BaseModel):
    overview: StatusOverview
    users: UserStats
    categories: list[CategoryStats]
    flagged_issues: list[FlaggedIssue]
    recent_activity: list[RecentActivity]
