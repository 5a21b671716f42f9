"""
User model.

Accounts are owned by the external authentication layer; CivicTrack
only reads them to resolve the requesting identity and display names.
"""
from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship

from app.models.base import Base, TimestampMixin, new_id


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)

    is_admin = Column(Boolean, nullable=False, default=False)
    is_banned = Column(Boolean, nullable=False, default=False)

    issues = relationship("Issue", back_populates="reporter")

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', admin={self.is_admin})>"
