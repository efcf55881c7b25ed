"""Task service - CRUD over tasks scoped to their owner.

Every method takes the authenticated owner's ID. Tasks owned by someone
else raise NotFoundError, never a permission error, so callers cannot
discover other users' task IDs.
"""
from typing import Any, Dict, List, Optional, Tuple

from ...errors import NotFoundError, ValidationError
from ...infrastructure.repositories import TaskRepository

ALLOWED_TASK_UPDATES = {"description", "completed"}

# Public sort keys mapped to columns
SORT_FIELDS = {
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
    "description": "description",
    "completed": "completed",
}


def parse_sort(sort_by: Optional[str]) -> Tuple[str, bool]:
    """Parse "field:asc|desc" into (column, descending).

    Raises:
        ValidationError: Unknown field or direction
    """
    if not sort_by:
        return "created_at", False

    field, _, direction = sort_by.partition(":")
    column = SORT_FIELDS.get(field)
    if column is None:
        raise ValidationError(f"Cannot sort by {field!r}")

    direction = direction.lower() or "asc"
    if direction not in ("asc", "desc"):
        raise ValidationError(f"Sort direction must be asc or desc, got {direction!r}")
    return column, direction == "desc"


class TaskService:
    """Service for task operations.

    Responsibilities:
    - Task CRUD for the authenticated owner
    - Filtering, pagination and sorting of the owner's task list
    """

    def __init__(self, task_repository: TaskRepository):
        self.task_repo = task_repository

    def create_task(self, owner: str, description: str, completed: bool = False) -> dict:
        """Create a task owned by owner.

        Raises:
            ValidationError: Empty description
        """
        description = self._check_description(description)
        task_id = self.task_repo.create(owner=owner, description=description, completed=completed)
        return self.task_repo.get_for_owner(task_id, owner)

    def list_tasks(
        self,
        owner: str,
        completed: Optional[bool] = None,
        limit: Optional[int] = None,
        skip: int = 0,
        sort_by: Optional[str] = None
    ) -> List[dict]:
        """List owner's tasks.

        Args:
            owner: Owner user ID
            completed: Filter on completion state
            limit: Page size (unlimited when None)
            skip: Offset into the result
            sort_by: "field:asc" or "field:desc"

        Returns:
            List of task dicts
        """
        if limit is not None and limit < 0:
            raise ValidationError("limit must not be negative")
        if skip < 0:
            raise ValidationError("skip must not be negative")

        column, descending = parse_sort(sort_by)
        return self.task_repo.list_for_owner(
            owner,
            completed=completed,
            limit=limit,
            skip=skip,
            order_by=column,
            descending=descending
        )

    def get_task(self, owner: str, task_id: str) -> dict:
        """Get an owned task.

        Raises:
            NotFoundError: Task absent or owned by someone else
        """
        task = self.task_repo.get_for_owner(task_id, owner)
        if not task:
            raise NotFoundError("Task not found")
        return task

    def update_task(self, owner: str, task_id: str, updates: Dict[str, Any]) -> dict:
        """Update description and/or completed.

        Raises:
            ValidationError: Unknown or null fields, or empty description
            NotFoundError: Task absent or owned by someone else
        """
        if not set(updates) <= ALLOWED_TASK_UPDATES or None in updates.values():
            raise ValidationError("Invalid updates!")

        fields = dict(updates)
        if "description" in fields:
            fields["description"] = self._check_description(fields["description"])

        if not self.task_repo.update(task_id, owner, **fields):
            raise NotFoundError("Task not found")
        return self.task_repo.get_for_owner(task_id, owner)

    def delete_task(self, owner: str, task_id: str) -> dict:
        """Delete an owned task.

        Returns:
            The deleted task dict

        Raises:
            NotFoundError: Task absent or owned by someone else
        """
        task = self.get_task(owner, task_id)
        if not self.task_repo.delete(task_id, owner):
            raise NotFoundError("Task not found")
        return task

    @staticmethod
    def _check_description(description: str) -> str:
        description = description.strip()
        if not description:
            raise ValidationError("Description is required")
        return description
