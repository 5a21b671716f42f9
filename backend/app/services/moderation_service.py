"""
Moderation service - flag threshold and visibility overrides.

An issue moves visible -> hidden when its flag count reaches the
configured threshold. Only an explicit admin action moves it back.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.core.exceptions import (
    ConflictError, ForbiddenError, InvalidArgumentError, NotFoundError
)
from app.models.issue import Issue
from app.models.user import User
from app.repositories.issue_repository import IssueRepository

logger = logging.getLogger(__name__)


@dataclass
class FlagResult:
    success: bool
    flag_count: int
    is_hidden: bool


def submit_flag(
    db: Session,
    issue_id: str,
    user_id: str,
    reason: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> FlagResult:
    """
    Record a flag from `user_id` against `issue_id`.

    Checked in order before anything is written:
    missing issue -> NotFoundError, own issue -> ForbiddenError,
    repeat flag -> ConflictError (from the unique constraint).

    The flag insert and the counter update commit together.
    """
    settings = settings or get_settings()
    if reason is not None and len(reason) > settings.flag_reason_max_length:
        raise InvalidArgumentError(
            f"Reason must be at most {settings.flag_reason_max_length} characters"
        )

    repo = IssueRepository(db)

    issue = repo.get(issue_id)
    if not issue:
        raise NotFoundError("Issue not found")

    if issue.reporter_id is not None and issue.reporter_id == user_id:
        raise ForbiddenError("Cannot flag your own issue")

    was_hidden = issue.is_hidden

    try:
        repo.insert_flag(issue_id, user_id, reason)
    except IntegrityError:
        db.rollback()
        raise ConflictError("You have already flagged this issue")

    try:
        flag_count, is_hidden = repo.atomic_increment_flag_count(
            issue_id, settings.flag_hide_threshold
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Issue %s flagged by %s (flag_count=%d)", issue_id, user_id, flag_count)
    if is_hidden and not was_hidden:
        logger.info("Issue %s auto-hidden after %d flags", issue_id, flag_count)

    return FlagResult(success=True, flag_count=flag_count, is_hidden=is_hidden)


def set_issue_visibility(db: Session, issue_id: str, is_hidden: bool, admin: User) -> Issue:
    """Admin override: hide an issue or restore an auto-hidden one."""
    if not admin.is_admin:
        raise ForbiddenError("Admin privileges required")

    repo = IssueRepository(db)
    issue = repo.get(issue_id)
    if not issue:
        raise NotFoundError("Issue not found")

    repo.set_hidden(issue, is_hidden)
    db.commit()
    db.refresh(issue)

    logger.info(
        "Issue %s %s by admin %s", issue_id, "hidden" if is_hidden else "unhidden", admin.id
    )
    return issue


def list_flagged_issues(
    db: Session,
    page: int = 1,
    limit: int = 20,
    settings: Optional[Settings] = None,
) -> tuple[list[Issue], int]:
    settings = settings or get_settings()
    if page < 1:
        raise InvalidArgumentError("page must be >= 1")
    if not 1 <= limit <= settings.max_page_size:
        raise InvalidArgumentError(f"limit must be between 1 and {settings.max_page_size}")

    return IssueRepository(db).find_flagged(limit=limit, offset=(page - 1) * limit)
