"""
Business logic services.

Services handle the application logic between API and database.
"""
from app.services import issue_service
from app.services import moderation_service
from app.services import dashboard_service
from app.services import vote_service
