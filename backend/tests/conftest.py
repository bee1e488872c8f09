"""Shared test fixtures for all test modules."""

import contextlib

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import prodfind.models  # noqa: F401
from prodfind.core import database as db_module
from prodfind.core.bot_detection import bot_detector
from prodfind.core.database import Base
from prodfind.models.user import User, UserRole
from prodfind.repositories.user_repository import UserRepository
from prodfind.schemas.user import UserCreate
from prodfind.services.session_service import SessionService

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)


def create_user(
    db: Session,
    name: str = "Ada",
    email: str | None = None,
    role: UserRole = UserRole.USER,
) -> User:
    """Insert a user; the email defaults to one derived from ``name``."""
    return UserRepository(db).create(
        UserCreate(
            name=name,
            email=email or f"{name.lower().replace(' ', '.')}@example.com",
            role=role,
        )
    )


def auth_headers(db: Session, user: User) -> dict[str, str]:
    """Issue a session for ``user`` and return the matching Authorization header."""
    _, token = SessionService(db).issue(user.id)  # type: ignore[arg-type]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database. Clears data after each test.
    """
    # Patch module-level engine and session factory
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    # Restore originals
    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture(autouse=True)
def _reset_bot_detector():
    bot_detector.reset()
    yield
    bot_detector.reset()
