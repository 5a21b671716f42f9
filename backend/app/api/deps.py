"""
Request identity dependencies.

Authentication happens upstream; the gateway forwards the
authenticated user id in the X-User-Id header.
"""
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.db.session import get_db
from app.models.user import User


def get_current_user(
    x_user_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Resolve the requesting user, or None for anonymous requests."""
    if not x_user_id:
        return None

    user = db.get(User, x_user_id)
    if not user:
        raise UnauthorizedError("Unknown user")
    if user.is_banned:
        raise ForbiddenError("Account is banned")
    return user


def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    if user is None:
        raise UnauthorizedError("Authentication required")
    return user


def require_admin(user: User = Depends(require_user)) -> User:
    if not user.is_admin:
        raise ForbiddenError("Admin privileges required")
    return user
