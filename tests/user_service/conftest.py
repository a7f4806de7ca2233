"""Pytest fixtures for user service tests."""

import os
from typing import Callable, Generator, Sequence

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from user_service.database import Base, build_engine, get_db
from user_service.main import app
from user_service.models.role import Role, seed_roles
from user_service.models.user import User


@pytest.fixture(scope="function")
def test_db_engine():
    """Create a database engine for testing.

    Uses TEST_DATABASE_URL when set, otherwise an in-memory SQLite database
    shared across connections.
    """
    test_db_url = os.getenv("TEST_DATABASE_URL", "sqlite://")

    if make_url(test_db_url).get_backend_name() == "sqlite":
        engine = build_engine(test_db_url, poolclass=StaticPool)
    else:
        engine = build_engine(test_db_url)

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Cleanup: drop all tables
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine) -> Generator[Session, None, None]:
    """Create a database session with the reference roles seeded."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine,
    )

    session = TestingSessionLocal()
    seed_roles(session)

    try:
        yield session
    finally:
        # Rollback any uncommitted changes to clean up test data
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def test_client(test_db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database dependency override."""

    def override_get_db() -> Generator[Session, None, None]:
        """Override get_db dependency to use test database session."""
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    client = TestClient(app)

    try:
        yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def create_user(test_db_session: Session) -> Callable:
    """Factory function to create users directly in the database.

    Example:
        ```python
        def test_example(create_user):
            user = create_user(name="Ann", age=30, email="ann@example.com", role_ids=(1, 2))
            assert [role.name for role in user.roles] == ["User", "Admin"]
        ```
    """

    def _create_user(
        name: str,
        age: int,
        email: str,
        role_ids: Sequence[int] = (1,),
    ) -> User:
        roles = [test_db_session.get(Role, role_id) for role_id in role_ids]
        user = User(name=name, age=age, email=email, roles=roles)
        test_db_session.add(user)
        test_db_session.commit()
        test_db_session.refresh(user)
        return user

    return _create_user
