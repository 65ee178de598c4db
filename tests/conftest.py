"""
Test configuration and fixtures for Go URLs.
This centralizes all test setup, making individual tests clean.
"""

import os

# Must be set before the app (and its settings) are imported
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
os.environ["DATABASE_URL"] = SQLALCHEMY_DATABASE_URL
os.environ["RESERVED_WORDS"] = "admin,api,create,user,search"
os.environ["SEED_ON_STARTUP"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from main import app
from gourls_app.database.connection import Base, get_db
from gourls_app.services.reserved_words import ReservedWords
from gourls_app.services.url_service import UrlService

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    # Create tables
    Base.metadata.create_all(bind=engine)

    # Create session
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        # Cleanup
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session, monkeypatch):
    """
    Create a test client with database dependency overridden.
    This is the main fixture that tests will use.
    """
    # Requests without X-User-Name must not pick up the developer's CURRENT_USER
    monkeypatch.delenv("CURRENT_USER", raising=False)

    def override_get_db():
        yield db_session

    # Override the database dependency
    app.dependency_overrides[get_db] = override_get_db

    # Create test client
    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()


@pytest.fixture
def reserved_words():
    return ReservedWords.from_csv("admin,api")


@pytest.fixture
def make_service(db_session, reserved_words):
    """Build a UrlService acting as the given user"""
    def _make(user: str) -> UrlService:
        return UrlService(db_session, reserved_words=reserved_words, current_user=user)
    return _make
