"""Dashboard service - admin analytics."""
from sqlalchemy import func, case
from sqlalchemy.orm import Session

from app.models.issue_status_log import IssueStatusLog
from app.models.user import User
from app.repositories.issue_repository import IssueRepository


def get_user_stats(db: Session) -> dict:
    row = db.query(
        func.count(User.id).label("total_users"),
        func.sum(case((User.is_admin.is_(True), 1), else_=0)).label("admin_users"),
        func.sum(case((User.is_banned.is_(True), 1), else_=0)).label("banned_users"),
    ).one()
    return {key: int(value or 0) for key, value in row._mapping.items()}


def get_recent_activity(db: Session, limit: int = 20) -> list[IssueStatusLog]:
    return (
        db.query(IssueStatusLog)
        .order_by(IssueStatusLog.created_at.desc())
        .limit(limit)
        .all()
    )


def get_dashboard(db: Session) -> dict:
    repo = IssueRepository(db)
    flagged, _ = repo.find_flagged(limit=10)

    return {
        "overview": repo.status_overview(),
        "users": get_user_stats(db),
        "categories": repo.category_breakdown(),
        "flagged_issues": flagged,
        "recent_activity": get_recent_activity(db),
    }
