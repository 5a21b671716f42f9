"""
Issue model.

A civic issue reported by a citizen. Location is stored as flat
latitude/longitude columns so the radius pre-filter is a plain
range query on an indexed pair.
"""
from sqlalchemy import (
    Column, String, Text, Float, Integer, Boolean, ForeignKey,
    CheckConstraint, Index
)
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin, new_id

ISSUE_CATEGORIES = (
    "roads",
    "lighting",
    "water_supply",
    "cleanliness",
    "public_safety",
    "obstructions",
)
ISSUE_STATUSES = ("reported", "in_progress", "resolved")


def _in_clause(column: str, values: tuple) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


class Issue(Base, TimestampMixin):
    __tablename__ = "issues"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)

    category = Column(
        String(50),
        CheckConstraint(_in_clause("category", ISSUE_CATEGORIES), name="ck_issues_category"),
        nullable=False,
        index=True
    )
    status = Column(
        String(20),
        CheckConstraint(_in_clause("status", ISSUE_STATUSES), name="ck_issues_status"),
        nullable=False,
        default="reported",
        index=True
    )

    # Location (immutable after creation)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String(500))

    # Reporter (NULL = anonymous submission)
    reporter_id = Column(String(36), ForeignKey("users.id"), index=True)
    is_anonymous = Column(Boolean, nullable=False, default=False)

    # Moderation
    flag_count = Column(
        Integer,
        CheckConstraint("flag_count >= 0", name="ck_issues_flag_count"),
        nullable=False,
        default=0
    )
    is_hidden = Column(Boolean, nullable=False, default=False, index=True)

    # Votes
    upvotes = Column(
        Integer,
        CheckConstraint("upvotes >= 0", name="ck_issues_upvotes"),
        nullable=False,
        default=0
    )
    downvotes = Column(
        Integer,
        CheckConstraint("downvotes >= 0", name="ck_issues_downvotes"),
        nullable=False,
        default=0
    )

    reporter = relationship("User", back_populates="issues")
    votes = relationship("IssueVote", back_populates="issue")
    flags = relationship(
        "IssueFlag",
        back_populates="issue",
        order_by="IssueFlag.created_at.desc()",
    )
    status_logs = relationship(
        "IssueStatusLog",
        back_populates="issue",
        order_by="IssueStatusLog.created_at.desc()",
    )

    __table_args__ = (
        Index("idx_issues_lat_lon", "latitude", "longitude"),
        Index("idx_issues_hidden_created", "is_hidden", "created_at"),
    )

    def __repr__(self):
        return f"<Issue(id={self.id}, category={self.category}, status={self.status}, hidden={self.is_hidden})>"

    @property
    def reporter_name(self) -> str:
        if self.is_anonymous or self.reporter is None:
            return "Anonymous"
        return self.reporter.name
