# Repository Pattern Implementation
"""
Repositories abstract database operations.
Each entity has its own repository.

Usage:
    repo = UserRepository(get_db())
    user = repo.get_by_email("someone@example.com")
"""
from .base import Repository, ConnectionProtocol
from .user_repository import UserRepository
from .token_repository import TokenRepository
from .task_repository import TaskRepository

__all__ = [
    "Repository",
    "ConnectionProtocol",
    "UserRepository",
    "TokenRepository",
    "TaskRepository",
]
