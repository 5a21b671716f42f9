"""
Issue flag model.

A user's signal that a report is inappropriate. One flag per
(issue, user); the unique constraint is the duplicate check.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.models.base import Base, new_id, utcnow


class IssueFlag(Base):
    __tablename__ = "issue_flags"

    id = Column(String(36), primary_key=True, default=new_id)
    issue_id = Column(String(36), ForeignKey("issues.id"), nullable=False, index=True)
    flagged_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    reason = Column(String(200))

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    issue = relationship("Issue", back_populates="flags")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("issue_id", "flagged_by", name="uq_issue_flags_issue_user"),
    )

    def __repr__(self):
        return f"<IssueFlag(issue={self.issue_id}, by={self.flagged_by})>"
