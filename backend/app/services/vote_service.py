"""
Vote service - one vote per user per issue.

Casting the same vote type again withdraws it; casting the other type
switches it. The vote row and the issue counters commit together.
"""
import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    ConflictError, ForbiddenError, InvalidArgumentError, NotFoundError
)
from app.models.issue_vote import VOTE_TYPES
from app.repositories.issue_repository import IssueRepository

logger = logging.getLogger(__name__)

ADDED = "added"
REMOVED = "removed"
UPDATED = "updated"


@dataclass
class VoteResult:
    action: str
    vote_type: str
    upvotes: int
    downvotes: int


def _delta(vote_type: str, step: int) -> dict:
    return {"upvotes": step} if vote_type == "upvote" else {"downvotes": step}


def cast_vote(db: Session, issue_id: str, user_id: str, vote_type: str) -> VoteResult:
    """
    Add, withdraw or switch `user_id`'s vote on `issue_id`.

    Raises NotFoundError for a missing issue, ForbiddenError on the
    reporter's own issue and ConflictError when a concurrent request
    changed the same vote first.
    """
    if vote_type not in VOTE_TYPES:
        raise InvalidArgumentError(
            f"Invalid vote type: {vote_type}",
            details={"allowed": list(VOTE_TYPES)},
        )

    repo = IssueRepository(db)

    issue = repo.get(issue_id)
    if not issue:
        raise NotFoundError("Issue not found")

    if issue.reporter_id is not None and issue.reporter_id == user_id:
        raise ForbiddenError("Cannot vote on your own issue")

    existing = repo.get_vote(issue_id, user_id)

    try:
        if existing is None:
            repo.insert_vote(issue_id, user_id, vote_type)
            action = ADDED
            deltas = _delta(vote_type, 1)
        elif existing.vote_type == vote_type:
            if not repo.delete_vote(existing.id, vote_type):
                raise ConflictError("Vote changed concurrently, retry")
            action = REMOVED
            deltas = _delta(vote_type, -1)
        else:
            if not repo.switch_vote(existing.id, existing.vote_type, vote_type):
                raise ConflictError("Vote changed concurrently, retry")
            action = UPDATED
            deltas = {**_delta(existing.vote_type, -1), **_delta(vote_type, 1)}

        upvotes, downvotes = repo.adjust_vote_counts(issue_id, **deltas)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Vote changed concurrently, retry")
    except Exception:
        db.rollback()
        raise

    logger.info("Vote %s on issue %s by %s (%s)", action, issue_id, user_id, vote_type)
    return VoteResult(action=action, vote_type=vote_type, upvotes=upvotes, downvotes=downvotes)
