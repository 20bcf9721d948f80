"""
Pytest configuration file for all tests.
This file is automatically loaded by pytest.
"""

import os
import sys
import uuid
import pytest
from datetime import datetime, timedelta, timezone
from dotenv import load_dotenv

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

# Load test environment variables
def load_test_env():
    """Load environment variables from .env.test file"""
    # Get the project root directory
    root_dir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))

    # Path to .env.test file
    env_test_path = os.path.join(root_dir, '.env.test')

    # Load environment variables from .env.test
    if os.path.exists(env_test_path):
        load_dotenv(env_test_path, override=True)
        return True
    else:
        print(f"Warning: Test environment file not found: {env_test_path}")
        return False

# Must run before the app (and its settings) are imported
load_test_env()

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.main import app
from app.core.database import get_db, Base
from app.core.init_db import create_tables

# Create a test database engine
TEST_SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(
    TEST_SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False}  # SQLite specific argument
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Override the dependency
def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="module")
def setup_db():
    # Clean up any existing database first
    Base.metadata.drop_all(bind=engine)
    create_tables(bind=engine)

    yield

    # Clean up
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="module")
def client(setup_db):
    return TestClient(app)


@pytest.fixture
def db_session(setup_db):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def future_deadline(days: int = 7) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="module")
def register_user(client):
    """
    Factory that registers a fresh user, logs in and returns the login token.
    """
    def _register(role: str = "client", password: str = "Secret123!") -> str:
        username = f"{role}-{uuid.uuid4().hex[:10]}@example.com"
        response = client.post(
            "/register",
            json={
                "username": username,
                "email": username,
                "password": password,
                "role": role
            }
        )
        assert response.status_code == 201, response.text

        response = client.post("/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return response.json()["token"]

    return _register


@pytest.fixture(scope="module")
def create_tender(client):
    """
    Factory that creates a tender for the given client token and returns its JSON.
    """
    def _create(token: str, **overrides) -> dict:
        payload = {
            "title": "Office refurbishment",
            "description": "Paint and floor two office levels",
            "deadline": future_deadline(),
            "budget": 50000,
        }
        payload.update(overrides)
        response = client.post("/api/client/tenders", json=payload, headers=auth_header(token))
        assert response.status_code == 201, response.text
        return response.json()

    return _create
