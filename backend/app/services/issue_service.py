"""
Issue service - radius search and report lifecycle.

list_visible_issues runs the two-phase geo search: the repository
prunes candidates with a bounding box in the datastore, then exact
Haversine distance decides inclusion and order here.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.core.exceptions import ForbiddenError, InvalidArgumentError, NotFoundError
from app.core.geo import GeoPoint, bounding_box, haversine
from app.models.base import utcnow
from app.models.issue import Issue, ISSUE_CATEGORIES, ISSUE_STATUSES
from app.models.issue_status_log import IssueStatusLog
from app.models.user import User
from app.repositories.issue_repository import IssueRepository

logger = logging.getLogger(__name__)

ALL = "all"


@dataclass
class VisibleIssue:
    """An issue annotated with its distance from the search center (km)."""
    issue: Issue
    distance: Optional[float] = None


def _normalize_filter(value: Optional[str], allowed: tuple, name: str) -> Optional[str]:
    if value is None or value == ALL:
        return None
    if value not in allowed:
        raise InvalidArgumentError(
            f"Invalid {name}: {value}",
            details={"allowed": [ALL, *allowed]},
        )
    return value


def _validate_page(page: int, limit: int, settings: Settings) -> None:
    if page < 1:
        raise InvalidArgumentError("page must be >= 1")
    if not 1 <= limit <= settings.max_page_size:
        raise InvalidArgumentError(f"limit must be between 1 and {settings.max_page_size}")


def _validate_radius(radius_km: float, settings: Settings) -> None:
    if not settings.radius_min_km <= radius_km <= settings.radius_max_km:
        raise InvalidArgumentError(
            f"radius must be between {settings.radius_min_km} and {settings.radius_max_km} km"
        )


def sort_by_distance(hits: list[VisibleIssue]) -> list[VisibleIssue]:
    """Ascending distance; ties newest first, then by id."""
    hits = sorted(hits, key=lambda h: h.issue.id)
    hits.sort(key=lambda h: h.issue.created_at, reverse=True)
    hits.sort(key=lambda h: h.distance)
    return hits


def list_visible_issues(
    db: Session,
    center: Optional[GeoPoint] = None,
    radius_km: Optional[float] = None,
    category: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 1,
    limit: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> tuple[list[VisibleIssue], int]:
    """
    List non-hidden issues, optionally restricted to a radius around `center`.

    Returns (page of issues, total matching). With a center every item
    carries its Haversine distance and the list is ordered nearest first;
    otherwise newest first.
    """
    settings = settings or get_settings()
    limit = limit if limit is not None else settings.default_page_size
    radius_km = radius_km if radius_km is not None else settings.default_radius_km

    _validate_page(page, limit, settings)
    category = _normalize_filter(category, ISSUE_CATEGORIES, "category")
    status = _normalize_filter(status, ISSUE_STATUSES, "status")

    repo = IssueRepository(db)
    offset = (page - 1) * limit

    if center is None:
        issues, total = repo.find_visible(category, status, limit=limit, offset=offset)
        return [VisibleIssue(issue) for issue in issues], total

    if not center.is_valid():
        raise InvalidArgumentError("latitude must be within [-90, 90] and longitude within [-180, 180]")
    _validate_radius(radius_km, settings)

    box = bounding_box(center, radius_km, settings.polar_latitude_limit)
    candidates = repo.find_within_bounding_box(box, category, status)

    hits = []
    for issue in candidates:
        distance = haversine(center.latitude, center.longitude, issue.latitude, issue.longitude)
        if distance <= radius_km:
            hits.append(VisibleIssue(issue, distance))

    logger.debug(
        "Radius search (%.5f, %.5f) r=%.2fkm: %d candidates, %d within radius",
        center.latitude, center.longitude, radius_km, len(candidates), len(hits),
    )

    hits = sort_by_distance(hits)
    return hits[offset:offset + limit], len(hits)


def get_issue(db: Session, issue_id: str) -> Issue:
    """Public read: hidden issues are reported as missing."""
    issue = IssueRepository(db).get(issue_id)
    if not issue or issue.is_hidden:
        raise NotFoundError("Issue not found")
    return issue


def create_issue(
    db: Session,
    title: str,
    description: str,
    category: str,
    latitude: float,
    longitude: float,
    address: Optional[str] = None,
    reporter: Optional[User] = None,
    is_anonymous: bool = False,
) -> Issue:
    if category not in ISSUE_CATEGORIES:
        raise InvalidArgumentError(f"Invalid category: {category}")
    if not GeoPoint(latitude, longitude).is_valid():
        raise InvalidArgumentError("latitude must be within [-90, 90] and longitude within [-180, 180]")

    reporter_id = reporter.id if reporter else None
    issue = Issue(
        title=title,
        description=description,
        category=category,
        status="reported",
        latitude=latitude,
        longitude=longitude,
        address=address,
        reporter_id=reporter_id,
        is_anonymous=is_anonymous or reporter is None,
        flag_count=0,
        is_hidden=False,
    )
    db.add(issue)
    db.flush()

    db.add(IssueStatusLog(
        issue_id=issue.id,
        status="reported",
        comment="Issue reported",
        updated_by=reporter_id,
    ))
    db.commit()
    db.refresh(issue)

    logger.info("Issue %s created (category=%s, anonymous=%s)", issue.id, category, issue.is_anonymous)
    return issue


def update_issue_status(
    db: Session,
    issue_id: str,
    status: str,
    admin: User,
    comment: Optional[str] = None,
) -> Issue:
    if not admin.is_admin:
        raise ForbiddenError("Admin privileges required")
    if status not in ISSUE_STATUSES:
        raise InvalidArgumentError(f"Invalid status: {status}")

    issue = IssueRepository(db).get(issue_id)
    if not issue:
        raise NotFoundError("Issue not found")

    previous = issue.status
    issue.status = status
    # onupdate does not fire when the status is unchanged
    issue.updated_at = utcnow()
    db.add(IssueStatusLog(
        issue_id=issue.id,
        status=status,
        comment=comment,
        updated_by=admin.id,
    ))
    db.commit()
    db.refresh(issue)

    logger.info("Issue %s status %s -> %s by %s", issue.id, previous, status, admin.id)
    return issue


def get_issue_stats(db: Session) -> dict:
    repo = IssueRepository(db)
    return {
        "overview": repo.status_overview(),
        "by_category": repo.category_breakdown(),
    }


def list_all_issues(
    db: Session,
    admin: User,
    category: Optional[str] = None,
    status: Optional[str] = None,
    flagged: bool = False,
    hidden: Optional[bool] = None,
    page: int = 1,
    limit: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> tuple[list[Issue], int]:
    """Admin listing, newest first. Hidden issues are included."""
    if not admin.is_admin:
        raise ForbiddenError("Admin privileges required")

    settings = settings or get_settings()
    limit = limit if limit is not None else settings.default_page_size
    _validate_page(page, limit, settings)
    category = _normalize_filter(category, ISSUE_CATEGORIES, "category")
    status = _normalize_filter(status, ISSUE_STATUSES, "status")

    return IssueRepository(db).find_all(
        category, status, flagged=flagged, hidden=hidden,
        limit=limit, offset=(page - 1) * limit,
    )


def list_reporter_issues(
    db: Session,
    reporter: User,
    page: int = 1,
    limit: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> tuple[list[Issue], int]:
    """The reporter's own issues, newest first, hidden ones included."""
    settings = settings or get_settings()
    limit = limit if limit is not None else settings.default_page_size
    _validate_page(page, limit, settings)

    return IssueRepository(db).find_by_reporter(reporter.id, limit=limit, offset=(page - 1) * limit)


def get_reporter_stats(db: Session, reporter: User) -> dict:
    repo = IssueRepository(db)
    return {
        "overview": repo.status_overview(reporter.id),
        "by_category": repo.category_breakdown(reporter.id),
    }
