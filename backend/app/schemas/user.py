"""Schemas for the requesting user's own issues."""
from pydantic import BaseModel

from app.schemas.common import Pagination
from app.schemas.issue import CategoryStats, Issue, StatusOverview


class OwnIssue(Issue):
    is_hidden: bool


class OwnIssueList(BaseModel):
    issues: list[OwnIssue]
    pagination: Pagination


class OwnStats(BaseModel):
    overview: StatusOverview
    by_category: list[CategoryStats]
