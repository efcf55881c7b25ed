"""HTTP routes.

- users: signup, login, logout and the /users/me profile
- tasks: owner-scoped task CRUD
"""
from .users import router as users_router
from .tasks import router as tasks_router

__all__ = ["users_router", "tasks_router"]
