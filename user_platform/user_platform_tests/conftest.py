"""
Pytest configuration for user service tests.

Points the service at a throwaway SQLite file and a cheap hash work factor
before any service module reads its settings.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_user_service.db")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "1000")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-at-least-32-bytes")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from user_platform.user_platform.user_service.db import Base, engine
from user_platform.user_platform.user_service.main import app
from user_platform.user_platform.user_service import models  # noqa: F401


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture(autouse=True)
def reset_database():
    # Drop all tables and recreate them before each test
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture
def db_session():
    """Create a database session for testing."""
    session = Session(bind=engine)
    yield session
    session.close()
