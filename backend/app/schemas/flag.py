"""Flag (moderation) schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class FlagCreate(BaseModel):
    reason: Optional[str] = Field(None, max_length=200)


class FlagResponse(BaseModel):
    success: bool
    message: str
    flag_count: int
    is_hidden: bool


class FlagDetail(BaseModel):
    id: str
    flagged_by: str
    user_name: Optional[str] = None
    reason: Optional[str] = None
    created_at: datetime
