"""Issue schemas."""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.schemas.common import PaginatedResponse

IssueCategory = Literal[
    "roads",
    "lighting",
    "water_supply",
    "cleanliness",
    "public_safety",
    "obstructions",
]
IssueStatus = Literal["reported", "in_progress", "resolved"]


class IssueLocation(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: Optional[str] = Field(None, max_length=500)


class IssueCreate(BaseModel):
    title: str = Field(..., min_length=5, max_length=200)
    description: str = Field(..., min_length=10, max_length=2000)
    category: IssueCategory
    location: IssueLocation
    is_anonymous: bool = False


class Issue(BaseModel):
    """Issue for list view."""
    id: str
    title: str
    description: str
    category: str
    status: str
    location: IssueLocation
    reporter_id: Optional[str] = None
    reporter_name: str
    flag_count: int
    upvotes: int = 0
    downvotes: int = 0
    created_at: datetime
    updated_at: datetime
    distance: Optional[float] = None  # km, radius searches only


class StatusLog(BaseModel):
    id: str
    status: str
    comment: Optional[str] = None
    updated_by_name: str
    created_at: datetime

    class Config:
        from_attributes = True


class IssueDetail(Issue):
    """Full issue with its status history."""
    status_logs: list[StatusLog] = []


class IssueList(PaginatedResponse[Issue]):
    pass


class IssueCreated(BaseModel):
    message: str
    issue: IssueDetail


class StatusUpdate(BaseModel):
    status: IssueStatus
    comment: Optional[str] = Field(None, max_length=500)


class StatusUpdateResponse(BaseModel):
    message: str
    status: str


class StatusOverview(BaseModel):
    total_issues: int = 0
    reported: int = 0
    in_progress: int = 0
    resolved: int = 0
    hidden: int = 0


class CategoryStats(BaseModel):
    category: str
    count: int
    resolved_count: int


class IssueStats(BaseModel):
    overview: StatusOverview
    by_category: list[CategoryStats]
