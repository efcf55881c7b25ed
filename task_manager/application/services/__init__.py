"""Application services - business logic layer."""

from .auth_service import AuthService
from .user_service import UserService
from .task_service import TaskService

__all__ = [
    "AuthService",
    "UserService",
    "TaskService",
]
