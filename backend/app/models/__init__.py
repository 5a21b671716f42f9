"""
SQLAlchemy models for CivicTrack.
"""
from app.models.base import Base
from app.models.user import User
from app.models.issue import Issue, ISSUE_CATEGORIES, ISSUE_STATUSES
from app.models.issue_flag import IssueFlag
from app.models.issue_vote import IssueVote, VOTE_TYPES
from app.models.issue_status_log import IssueStatusLog

__all__ = [
    "Base",
    "User",
    "Issue",
    "IssueFlag",
    "IssueVote",
    "IssueStatusLog",
    "ISSUE_CATEGORIES",
    "ISSUE_STATUSES",
    "VOTE_TYPES",
]
