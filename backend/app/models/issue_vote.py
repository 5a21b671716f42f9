"""
Issue vote model.

One vote per (issue, user); voting the same way again removes it,
voting the other way switches it.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from app.models.base import Base, new_id, utcnow

VOTE_TYPES = ("upvote", "downvote")


class IssueVote(Base):
    __tablename__ = "issue_votes"

    id = Column(String(36), primary_key=True, default=new_id)
    issue_id = Column(String(36), ForeignKey("issues.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    vote_type = Column(
        String(10),
        CheckConstraint("vote_type IN ('upvote', 'downvote')", name="ck_issue_votes_type"),
        nullable=False
    )

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    issue = relationship("Issue", back_populates="votes")

    __table_args__ = (
        UniqueConstraint("issue_id", "user_id", name="uq_issue_votes_issue_user"),
    )

    def __repr__(self):
        return f"<IssueVote(issue={self.issue_id}, by={self.user_id}, {self.vote_type})>"
