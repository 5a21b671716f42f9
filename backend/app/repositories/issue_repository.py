"""
Issue repository - the storage seam for geo search and moderation.

Services only talk to the datastore through this class, so the radius
filter and the flag threshold do not depend on a particular engine.
"""
from typing import Optional

from sqlalchemy import case, delete, func, or_, update
from sqlalchemy.orm import Session, Query

from app.core.geo import BoundingBox
from app.models.issue import Issue
from app.models.issue_flag import IssueFlag
from app.models.issue_vote import IssueVote


class IssueRepository:
    """Narrow storage interface over `issues` and its flag and vote tables."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, issue_id: str) -> Optional[Issue]:
        return self.db.get(Issue, issue_id)

    def visible_query(
        self,
        category: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Query:
        """Non-hidden issues with optional category/status filters."""
        query = self.db.query(Issue).filter(Issue.is_hidden.is_(False))

        if category:
            query = query.filter(Issue.category == category)
        if status:
            query = query.filter(Issue.status == status)

        return query

    def find_visible(
        self,
        category: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Issue], int]:
        """Newest-first page of visible issues."""
        query = self.visible_query(category, status)

        total = query.count()
        issues = (
            query.order_by(Issue.created_at.desc(), Issue.id)
            .offset(offset)
            .limit(limit)
            .all()
        )

        return issues, total

    def find_within_bounding_box(
        self,
        box: BoundingBox,
        category: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Issue]:
        """Visible issues inside the pre-filter window (may include false positives)."""
        query = self.visible_query(category, status).filter(
            Issue.latitude.between(box.lat_min, box.lat_max)
        )

        if box.lon_ranges is not None:
            query = query.filter(
                or_(*[Issue.longitude.between(lo, hi) for lo, hi in box.lon_ranges])
            )

        return query.all()

    def insert_flag(self, issue_id: str, user_id: str, reason: Optional[str] = None) -> IssueFlag:
        """
        Stage a flag row and flush it.

        Raises sqlalchemy.exc.IntegrityError when (issue_id, user_id)
        already exists; the caller owns the transaction.
        """
        flag = IssueFlag(issue_id=issue_id, flagged_by=user_id, reason=reason)
        self.db.add(flag)
        self.db.flush()
        return flag

    def atomic_increment_flag_count(self, issue_id: str, hide_threshold: int) -> tuple[int, bool]:
        """
        Increment flag_count and apply the hide threshold in one statement.

        Returns the new (flag_count, is_hidden). The CASE reads the
        pre-update value, so `flag_count + 1` is the new count.
        """
        stmt = (
            update(Issue)
            .where(Issue.id == issue_id)
            .values(
                flag_count=Issue.flag_count + 1,
                is_hidden=case(
                    (Issue.flag_count + 1 >= hide_threshold, True),
                    else_=Issue.is_hidden,
                ),
            )
            .returning(Issue.flag_count, Issue.is_hidden)
            .execution_options(synchronize_session=False)
        )
        flag_count, is_hidden = self.db.execute(stmt).one()
        return flag_count, bool(is_hidden)

    def set_hidden(self, issue: Issue, is_hidden: bool) -> Issue:
        issue.is_hidden = is_hidden
        self.db.flush()
        return issue

    def find_flagged(self, limit: int = 20, offset: int = 0) -> tuple[list[Issue], int]:
        """Issues with at least one flag, most-flagged first (hidden included)."""
        query = self.db.query(Issue).filter(Issue.flag_count > 0)

        total = query.count()
        issues = (
            query.order_by(Issue.flag_count.desc(), Issue.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

        return issues, total

    def find_all(
        self,
        category: Optional[str] = None,
        status: Optional[str] = None,
        flagged: bool = False,
        hidden: Optional[bool] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Issue], int]:
        """Admin listing: hidden issues included unless `hidden` says otherwise."""
        query = self.db.query(Issue)

        if category:
            query = query.filter(Issue.category == category)
        if status:
            query = query.filter(Issue.status == status)
        if flagged:
            query = query.filter(Issue.flag_count > 0)
        if hidden is not None:
            query = query.filter(Issue.is_hidden.is_(hidden))

        total = query.count()
        issues = (
            query.order_by(Issue.created_at.desc(), Issue.id)
            .offset(offset)
            .limit(limit)
            .all()
        )

        return issues, total

    def find_by_reporter(self, reporter_id: str, limit: int = 20, offset: int = 0) -> tuple[list[Issue], int]:
        """A reporter's own issues, newest first, hidden ones included."""
        query = self.db.query(Issue).filter(Issue.reporter_id == reporter_id)

        total = query.count()
        issues = (
            query.order_by(Issue.created_at.desc(), Issue.id)
            .offset(offset)
            .limit(limit)
            .all()
        )

        return issues, total

    def status_overview(self, reporter_id: Optional[str] = None) -> dict:
        """Counts by status plus hidden count, over all issues or one reporter's."""
        query = self.db.query(
            func.count(Issue.id).label("total_issues"),
            func.sum(case((Issue.status == "reported", 1), else_=0)).label("reported"),
            func.sum(case((Issue.status == "in_progress", 1), else_=0)).label("in_progress"),
            func.sum(case((Issue.status == "resolved", 1), else_=0)).label("resolved"),
            func.sum(case((Issue.is_hidden.is_(True), 1), else_=0)).label("hidden"),
        )
        if reporter_id is not None:
            query = query.filter(Issue.reporter_id == reporter_id)

        row = query.one()
        return {key: int(value or 0) for key, value in row._mapping.items()}

    def category_breakdown(self, reporter_id: Optional[str] = None) -> list[dict]:
        """
        Issue counts per category, largest first.

        Site-wide only visible issues count; for a single reporter all of
        their issues do.
        """
        query = self.db.query(
            Issue.category,
            func.count(Issue.id).label("count"),
            func.sum(case((Issue.status == "resolved", 1), else_=0)).label("resolved_count"),
        )
        if reporter_id is None:
            query = query.filter(Issue.is_hidden.is_(False))
        else:
            query = query.filter(Issue.reporter_id == reporter_id)

        rows = (
            query.group_by(Issue.category)
            .order_by(func.count(Issue.id).desc(), Issue.category)
            .all()
        )

        return [
            {
                "category": r.category,
                "count": int(r.count),
                "resolved_count": int(r.resolved_count or 0),
            }
            for r in rows
        ]

    # Votes

    def get_vote(self, issue_id: str, user_id: str) -> Optional[IssueVote]:
        return (
            self.db.query(IssueVote)
            .filter(IssueVote.issue_id == issue_id, IssueVote.user_id == user_id)
            .first()
        )

    def insert_vote(self, issue_id: str, user_id: str, vote_type: str) -> IssueVote:
        """
        Stage a vote row and flush it.

        Raises sqlalchemy.exc.IntegrityError when the user already voted
        on the issue.
        """
        vote = IssueVote(issue_id=issue_id, user_id=user_id, vote_type=vote_type)
        self.db.add(vote)
        self.db.flush()
        return vote

    def delete_vote(self, vote_id: str, vote_type: str) -> bool:
        """Remove a vote if it still has `vote_type`; False when it changed meanwhile."""
        stmt = (
            delete(IssueVote)
            .where(IssueVote.id == vote_id, IssueVote.vote_type == vote_type)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount == 1

    def switch_vote(self, vote_id: str, old_type: str, new_type: str) -> bool:
        """Flip a vote from `old_type` to `new_type`; False when it changed meanwhile."""
        stmt = (
            update(IssueVote)
            .where(IssueVote.id == vote_id, IssueVote.vote_type == old_type)
            .values(vote_type=new_type)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount == 1

    def adjust_vote_counts(self, issue_id: str, upvotes: int = 0, downvotes: int = 0) -> tuple[int, int]:
        """Apply counter deltas in one statement; returns the new (upvotes, downvotes)."""
        stmt = (
            update(Issue)
            .where(Issue.id == issue_id)
            .values(
                upvotes=Issue.upvotes + upvotes,
                downvotes=Issue.downvotes + downvotes,
            )
            .returning(Issue.upvotes, Issue.downvotes)
            .execution_options(synchronize_session=False)
        )
        new_up, new_down = self.db.execute(stmt).one()
        return new_up, new_down
