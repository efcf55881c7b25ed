"""Shared FastAPI dependencies and service factories."""
import sqlite3
from typing import Iterator

from fastapi import Depends, Request, HTTPException

from .application.services import AuthService, TaskService, UserService
from .database import connect
from .infrastructure.repositories import TaskRepository, TokenRepository, UserRepository


def get_current_user(request: Request) -> dict | None:
    """Get current user from request state."""
    return getattr(request.state, "user", None)


def require_user(request: Request) -> dict:
    """Require authenticated user, raise 401 if not authenticated."""
    user = get_current_user(request)
    if not user:
        raise HTTPException(status_code=401, detail="Please authenticate.")
    return user


def require_token(request: Request) -> str:
    """Token the current request authenticated with."""
    token = getattr(request.state, "token", None)
    if not token:
        raise HTTPException(status_code=401, detail="Please authenticate.")
    return token


def get_connection() -> Iterator[sqlite3.Connection]:
    """One connection per request, closed once the request is done."""
    conn = connect()
    try:
        yield conn
    finally:
        conn.close()


# Service factory functions

def build_auth_service(db: sqlite3.Connection, token_issuer) -> AuthService:
    """Create AuthService over a connection with the given token issuer."""
    return AuthService(
        user_repository=UserRepository(db),
        token_repository=TokenRepository(db),
        token_issuer=token_issuer
    )


def get_auth_service(
    request: Request,
    db: sqlite3.Connection = Depends(get_connection)
) -> AuthService:
    """Create AuthService with repositories and the app's token issuer."""
    return build_auth_service(db, request.app.state.token_issuer)


def get_user_service(
    db: sqlite3.Connection = Depends(get_connection),
    auth_service: AuthService = Depends(get_auth_service)
) -> UserService:
    """Create UserService with repositories."""
    return UserService(user_repository=UserRepository(db), auth_service=auth_service)


def get_task_service(db: sqlite3.Connection = Depends(get_connection)) -> TaskService:
    """Create TaskService with repositories."""
    return TaskService(task_repository=TaskRepository(db))
