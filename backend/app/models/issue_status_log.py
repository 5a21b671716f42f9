"""
Status history for issues.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.models.base import Base, new_id, utcnow


class IssueStatusLog(Base):
    __tablename__ = "issue_status_logs"

    id = Column(String(36), primary_key=True, default=new_id)
    issue_id = Column(String(36), ForeignKey("issues.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False)
    comment = Column(String(500))
    updated_by = Column(String(36), ForeignKey("users.id"))  # NULL = system/anonymous

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    issue = relationship("Issue", back_populates="status_logs")
    user = relationship("User")

    @property
    def updated_by_name(self) -> str:
        return self.user.name if self.user else "System"
