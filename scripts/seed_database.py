"""
CivicTrack sample data

Creates the tables and inserts an admin, three citizens and a handful
of issues around lower Manhattan, upvoted by the other citizens. Safe
to re-run: existing users are matched by e-mail and issues are only
added to an empty table.

Usage:
    python scripts/seed_database.py
"""
from app.db.session import SessionLocal, init_db
from app.models import Issue, User
from app.services import issue_service, vote_service

USERS = [
    {"name": "Admin User", "email": "admin@civictrack.com", "is_admin": True},
    {"name": "John Doe", "email": "john@example.com"},
    {"name": "Jane Smith", "email": "jane@example.com"},
    {"name": "Mike Johnson", "email": "mike@example.com"},
]

ISSUES = [
    {
        "title": "Large pothole on Main Street",
        "description": "Large pothole near the intersection with Oak Avenue, damaging vehicles.",
        "category": "roads",
        "latitude": 40.7128,
        "longitude": -74.0060,
        "address": "Main Street & Oak Avenue, New York, NY",
        "reporter": "john@example.com",
    },
    {
        "title": "Broken street light on 5th Avenue",
        "description": "Street light number 5 flickered and then went out completely.",
        "category": "lighting",
        "latitude": 40.7589,
        "longitude": -73.9851,
        "address": "5th Avenue, New York, NY",
        "reporter": "jane@example.com",
    },
    {
        "title": "Water leak at Central Park entrance",
        "description": "Water has been leaking from a pipe near the south entrance for days.",
        "category": "water_supply",
        "latitude": 40.7648,
        "longitude": -73.9724,
        "address": "Central Park South, New York, NY",
        "reporter": "mike@example.com",
    },
    {
        "title": "Overflowing garbage bins",
        "description": "Bins at the bus stop have not been emptied this week.",
        "category": "cleanliness",
        "latitude": 40.7306,
        "longitude": -73.9866,
        "address": "East Village, New York, NY",
        "reporter": None,
    },
    {
        "title": "Fallen tree blocking sidewalk",
        "description": "A tree fell during the storm and blocks the whole sidewalk.",
        "category": "obstructions",
        "latitude": 40.7061,
        "longitude": -74.0087,
        "address": "Wall Street, New York, NY",
        "reporter": "jane@example.com",
    },
]


def main():
    print("=" * 50)
    print("CivicTrack database seed")
    print("=" * 50)

    print("\n1. Creating tables...")
    init_db()

    db = SessionLocal()
    try:
        print("\n2. Users...")
        users = {}
        for data in USERS:
            user = db.query(User).filter(User.email == data["email"]).first()
            if not user:
                user = User(**data)
                db.add(user)
                db.commit()
                print(f"   + {data['email']}")
            users[user.email] = user

        print("\n3. Issues...")
        if db.query(Issue).count():
            print("   issues already present, skipping")
            return

        for data in ISSUES:
            data = dict(data)
            reporter = users.get(data.pop("reporter"))
            issue = issue_service.create_issue(db, reporter=reporter, **data)
            print(f"   + {issue.title}")

            # Everyone except the reporter upvotes
            for user in users.values():
                if user is not reporter and not user.is_admin:
                    vote_service.cast_vote(db, issue.id, user.id, "upvote")
    finally:
        db.close()

    print("\nDone!")


if __name__ == "__main__":
    main()
