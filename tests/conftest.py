"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.database import Base, engine_options, get_db
from src.main import app
from src.models.column import BoardColumn
from src.models.enums import UserRole
from src.services.auth import create_user

TEST_PASSWORD = "testpass123"


class AuthHeaders(dict):
    """Dict subclass that also stores the user's id, email and token."""

    def __init__(
        self,
        *args,
        user_id: int | None = None,
        email: str | None = None,
        token: str | None = None,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email
        self.token = token


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/kanban", "/kanban_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(SQLALCHEMY_DATABASE_URL, **engine_options(SQLALCHEMY_DATABASE_URL))
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def board_columns(db):
    """Seed the three default columns with fixed ids 1, 2, 3."""
    columns = [
        BoardColumn(id=1, title="To Do", order_index=0),
        BoardColumn(id=2, title="In Progress", order_index=1),
        BoardColumn(id=3, title="Done", order_index=2),
    ]
    db.add_all(columns)
    db.commit()
    return columns


@pytest.fixture(scope="function")
def client(db, board_columns):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _register(client, email: str, password: str = TEST_PASSWORD) -> AuthHeaders:
    """Register a user through the API and return its auth headers."""
    response = client.post("/auth/register", json={"email": email, "password": password})
    assert response.status_code == 201
    data = response.json()
    token = data["token"]
    return AuthHeaders(
        {"Authorization": f"Bearer {token}"},
        user_id=data["user"]["id"],
        email=email,
        token=token,
    )


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return _register(client, "test@example.com")


@pytest.fixture
def other_auth_headers(client):
    """A second regular user, for ownership checks."""
    return _register(client, "other@example.com")


@pytest.fixture
def admin_headers(client, db):
    """Create an admin directly in the database and log in as them."""
    email = "admin@example.com"
    create_user(db, email, TEST_PASSWORD, role=UserRole.ADMIN)

    response = client.post("/auth/login", json={"email": email, "password": TEST_PASSWORD})
    assert response.status_code == 200
    data = response.json()
    token = data["token"]
    return AuthHeaders(
        {"Authorization": f"Bearer {token}"},
        user_id=data["user"]["id"],
        email=email,
        token=token,
    )


@pytest.fixture
def register_user(client):
    """Factory registering extra users: ``register_user("b@x.com")``."""

    def register(email: str, password: str = TEST_PASSWORD) -> AuthHeaders:
        return _register(client, email, password)

    return register
