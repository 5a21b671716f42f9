"""Pydantic schemas for API request/response validation."""
from app.schemas.common import Pagination, PaginatedResponse
from app.schemas.issue import (
    Issue, IssueCreate, IssueDetail, IssueList, IssueLocation, IssueStats,
    StatusUpdate,
)
from app.schemas.flag import FlagCreate, FlagResponse
from app.schemas.vote import VoteCreate, VoteResponse
from app.schemas.admin import AdminIssueList, Dashboard, FlaggedIssueList, VisibilityUpdate
from app.schemas.user import OwnIssueList, OwnStats

__all__ = [
    "Pagination", "PaginatedResponse",
    "Issue", "IssueCreate", "IssueDetail", "IssueList", "IssueLocation", "IssueStats",
    "StatusUpdate",
    "FlagCreate", "FlagResponse",
    "VoteCreate", "VoteResponse",
    "AdminIssueList", "Dashboard", "FlaggedIssueList", "VisibilityUpdate",
    "OwnIssueList", "OwnStats",
]
