"""
CivicTrack - Civic Issue Reporting Backend

Citizens report local civic issues (roads, lighting, water supply, ...),
follow their status, and flag inappropriate reports. Administrators
moderate flagged content and review analytics.

Subsystems:
- GEO: Radius search (bounding-box prune + Haversine filter)
- MODERATION: Flag threshold and auto-hide
- ISSUES: Report lifecycle and status history
- ADMIN: Visibility overrides and dashboards
"""

__version__ = "0.1.0"
