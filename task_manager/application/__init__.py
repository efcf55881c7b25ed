"""Application layer - business logic services.

This layer contains application services that orchestrate domain operations.
Services are independent of HTTP/FastAPI and can be tested in isolation.
"""

from .services.auth_service import AuthService
from .services.user_service import UserService
from .services.task_service import TaskService

__all__ = [
    "AuthService",
    "UserService",
    "TaskService",
]
