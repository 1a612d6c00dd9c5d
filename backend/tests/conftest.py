import os

# Point the app at an in-memory database before it is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from typing import Callable, Dict, Generator, Any

from creatorops.database import Base, get_db
from creatorops.main import app
from creatorops.models import User, Creator
from creatorops.services.auth_service import get_auth_service

# --- Test Database Setup ---
# One shared in-memory SQLite connection; tables are rebuilt for every test.

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, Any, None]:
    """
    Provides a database session on freshly created tables.
    Services commit, so isolation comes from dropping the tables afterwards.
    """
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, Any, None]:
    """
    Provides a TestClient for the FastAPI application with the database
    dependency overridden. The lifespan (init_db) is not triggered.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory creating a user with an explicit role."""

    def _make_user(email: str, role: str, name: str = None) -> User:
        return get_auth_service().create_user(
            db_session, email=email, password=TEST_PASSWORD, name=name, role=role
        )

    return _make_user


@pytest.fixture
def admin(make_user) -> User:
    return make_user("admin@example.com", "admin", "Ada Admin")


@pytest.fixture
def manager(make_user) -> User:
    return make_user("manager@example.com", "manager", "Mona Manager")


@pytest.fixture
def associate(make_user) -> User:
    return make_user("associate@example.com", "associate", "Arun Associate")


@pytest.fixture
def creator(db_session: Session, manager: User) -> Creator:
    creator = Creator(
        name="Rajesh Kumar",
        email="rajesh@example.com",
        primary_category="Tech",
        created_by=manager.id,
    )
    db_session.add(creator)
    db_session.commit()
    db_session.refresh(creator)
    return creator


def auth_headers(user: User) -> Dict[str, str]:
    """Bearer header for a user, signed with the app's JWT settings."""
    token = get_auth_service().create_access_token(user.id, user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for() -> Callable[[User], Dict[str, str]]:
    return auth_headers
