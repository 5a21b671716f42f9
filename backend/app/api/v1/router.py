"""
API v1 Router - Aggregates all API endpoints.
"""
from fastapi import APIRouter

from app.api.v1 import issues, users, admin

api_router = APIRouter()

# Citizen-facing endpoints
api_router.include_router(issues.router, prefix="/issues", tags=["Issues"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])

# Moderation and analytics
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
