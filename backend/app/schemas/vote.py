"""Vote schemas."""
from typing import Literal

from pydantic import BaseModel

VoteType = Literal["upvote", "downvote"]


class VoteCreate(BaseModel):
    type: VoteType


class VoteResponse(BaseModel):
    message: str
    action: Literal["added", "removed", "updated"]
    vote_type: VoteType
    upvotes: int
    downvotes: int
