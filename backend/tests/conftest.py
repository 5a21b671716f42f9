"""
Shared fixtures: in-memory SQLite database, API client, factories.
"""
from datetime import datetime, timedelta, timezone
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import Settings
from app.db.session import get_db, init_db
from app.main import app
from app.models import Issue, User

BASE_TIME = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def make_user(db):
    seq = count(1)

    def _make_user(name=None, is_admin=False, is_banned=False):
        n = next(seq)
        user = User(
            name=name or f"User {n}",
            email=f"user{n}@example.com",
            is_admin=is_admin,
            is_banned=is_banned,
        )
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def make_issue(db):
    seq = count(1)

    def _make_issue(
        latitude=40.7128,
        longitude=-74.0060,
        reporter=None,
        category="roads",
        status="reported",
        is_hidden=False,
        flag_count=0,
        created_at=None,
        title=None,
    ):
        n = next(seq)
        issue = Issue(
            title=title or f"Issue number {n}",
            description="Something needs fixing here.",
            category=category,
            status=status,
            latitude=latitude,
            longitude=longitude,
            reporter_id=reporter.id if reporter else None,
            is_anonymous=reporter is None,
            is_hidden=is_hidden,
            flag_count=flag_count,
            created_at=created_at or BASE_TIME + timedelta(minutes=n),
        )
        db.add(issue)
        db.commit()
        return issue

    return _make_issue
