"""Test configuration and fixtures for Task Manager.

This module provides isolated test environments:
- Temporary database (SQLite)
- The seeded scenario every integration test starts from:
  two users with one pre-issued token each, and three tasks
  (two owned by user one, one by user two)
"""
import os
import sys
from pathlib import Path
from typing import Callable, Dict, Generator

import pytest
from fastapi.testclient import TestClient

# Ensure task_manager is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment BEFORE importing app modules
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"


USER_ONE = {
    "name": "Test User",
    "email": "test@test.com",
    "password": "test1234",
}

USER_TWO = {
    "name": "Another Test User",
    "email": "test2@test2.com",
    "password": "test1234",
}

TASK_ONE = {"description": "First Task", "completed": False}
TASK_TWO = {"description": "Second Task", "completed": True}
TASK_THREE = {"description": "Third Task", "completed": True}


@pytest.fixture(scope="function")
def patched_config(tmp_path: Path):
    """Point the app at a per-test database file."""
    import task_manager.config as config
    from task_manager.database import close_db

    original = config.DATABASE_PATH
    close_db()
    config.DATABASE_PATH = tmp_path / "test.db"

    yield config

    close_db()
    config.DATABASE_PATH = original


@pytest.fixture(scope="function")
def fresh_database(patched_config):
    """Initialize fresh database with schema for each test.

    Yields the main thread's connection.
    """
    from task_manager.database import init_db, get_db

    init_db()
    yield get_db()


@pytest.fixture(scope="function")
def token_issuer(patched_config):
    """Issuer configured the same way as the running app."""
    from task_manager.services.tokens import TokenIssuer

    return TokenIssuer(
        patched_config.JWT_SECRET,
        expires_hours=patched_config.TOKEN_EXPIRY_HOURS,
        algorithm=patched_config.JWT_ALGORITHM,
    )


@pytest.fixture(scope="function")
def client(fresh_database) -> Generator[TestClient, None, None]:
    """Create test client with fresh isolated database.

    Usage:
        def test_something(client):
            response = client.get("/users/me")
            assert response.status_code == 401
    """
    from task_manager.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def seeded(fresh_database, token_issuer) -> Dict:
    """Seed users and tasks directly through the repositories.

    Returns:
        Dict with user_one, user_two, task_one, task_two, task_three.
        Users carry id, token and their plain credentials; tasks carry id
        and owner.
    """
    from task_manager.application.services import AuthService
    from task_manager.infrastructure.repositories import (
        TaskRepository, TokenRepository, UserRepository
    )

    users = UserRepository(fresh_database)
    tasks = TaskRepository(fresh_database)
    auth = AuthService(users, TokenRepository(fresh_database), token_issuer)

    data = {}
    for key, credentials in (("user_one", USER_ONE), ("user_two", USER_TWO)):
        user_id = users.create(**credentials)
        data[key] = dict(credentials, id=user_id, token=auth.issue_token(user_id))

    for key, task, owner in (
        ("task_one", TASK_ONE, data["user_one"]),
        ("task_two", TASK_TWO, data["user_one"]),
        ("task_three", TASK_THREE, data["user_two"]),
    ):
        task_id = tasks.create(owner=owner["id"], **task)
        data[key] = dict(task, id=task_id, owner=owner["id"])

    return data


@pytest.fixture
def user_one(seeded) -> Dict:
    return seeded["user_one"]


@pytest.fixture
def user_two(seeded) -> Dict:
    return seeded["user_two"]


@pytest.fixture
def task_one(seeded) -> Dict:
    return seeded["task_one"]


@pytest.fixture
def task_two(seeded) -> Dict:
    return seeded["task_two"]


@pytest.fixture
def task_three(seeded) -> Dict:
    return seeded["task_three"]


@pytest.fixture
def auth_headers() -> Callable[[str], Dict[str, str]]:
    """Build an Authorization header for a token.

    Usage:
        client.get("/users/me", headers=auth_headers(user_one["token"]))
    """
    def _headers(token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"}
    return _headers
