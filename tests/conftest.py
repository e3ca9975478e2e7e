# tests/conftest.py

from __future__ import annotations

import os

# Keep the module-level engine off the developer's database file
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "testing")

from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from task_tracker import models  # noqa: F401 - registers tables
from task_tracker.database import Base, get_db, register_engine_events
from task_tracker.main import app


@pytest.fixture()
def engine() -> Iterator[Engine]:
    """
    Fresh in-memory SQLite database per test.

    StaticPool keeps a single connection so every session sees the same
    in-memory database; foreign keys are switched on by the engine events.
    """
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    register_engine_events(test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db_session: Session) -> Iterator[TestClient]:
    """
    TestClient whose requests share `db_session`, so tests can inspect rows
    written through the API. Lifespan is not run (no startup checks).
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def make_task(client: TestClient) -> Callable[..., dict]:
    """Create a task through the API and return its JSON"""

    def _make(title: str = "A", description: str = "B", **extra) -> dict:
        response = client.post("/api/tasks", json={"title": title, "description": description, **extra})
        assert response.status_code == 201, response.text
        return response.json()

    return _make
