"""Task repository - handles all task-related database operations.

Every query is filtered by owner. A task that belongs to someone else
looks exactly like a task that does not exist.
"""
import uuid

from ...database import utcnow
from .base import Repository


class TaskRepository(Repository):
    """Repository for task entity operations.

    Examples:
        >>> repo = TaskRepository(db)
        >>> task_id = repo.create(owner=user_id, description="Buy milk")
        >>> repo.get_for_owner(task_id, user_id)["completed"]
        False
    """

    UPDATABLE_FIELDS = {"description", "completed"}
    SORTABLE_COLUMNS = {"created_at", "updated_at", "description", "completed"}

    def create(self, owner: str, description: str, completed: bool = False) -> str:
        """Create new task.

        Args:
            owner: Owner user ID
            description: Task text
            completed: Initial completion state

        Returns:
            New task ID
        """
        task_id = uuid.uuid4().hex
        now = utcnow()

        self._execute(
            """INSERT INTO tasks (id, description, completed, owner, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (task_id, description.strip(), 1 if completed else 0, owner, now, now)
        )
        self._commit()
        return task_id

    def get_for_owner(self, task_id: str, owner: str) -> dict | None:
        """Get task if owned by owner.

        Args:
            task_id: Task ID
            owner: Owner user ID

        Returns:
            Task dict or None if absent or owned by someone else
        """
        cursor = self._execute(
            "SELECT * FROM tasks WHERE id = ? AND owner = ?",
            (task_id, owner)
        )
        return self._task_from_row(cursor.fetchone())

    def list_for_owner(
        self,
        owner: str,
        completed: bool | None = None,
        limit: int | None = None,
        skip: int = 0,
        order_by: str = "created_at",
        descending: bool = False
    ) -> list[dict]:
        """List owner's tasks.

        Args:
            owner: Owner user ID
            completed: Only tasks with this state, or all when None
            limit: Maximum rows, unlimited when None
            skip: Rows to skip
            order_by: One of SORTABLE_COLUMNS
            descending: Reverse the order

        Returns:
            List of task dicts
        """
        if order_by not in self.SORTABLE_COLUMNS:
            raise ValueError(f"Cannot sort tasks by {order_by!r}")

        sql = "SELECT * FROM tasks WHERE owner = ?"
        params: list = [owner]
        if completed is not None:
            sql += " AND completed = ?"
            params.append(1 if completed else 0)

        direction = "DESC" if descending else "ASC"
        # rowid breaks ties between tasks created in the same instant
        sql += f" ORDER BY {order_by} {direction}, rowid {direction}"
        sql += " LIMIT ? OFFSET ?"
        params.extend([limit if limit is not None else -1, skip])

        cursor = self._execute(sql, tuple(params))
        return [self._task_from_row(row) for row in cursor.fetchall()]

    def update(self, task_id: str, owner: str, **fields) -> bool:
        """Update task columns.

        Args:
            task_id: Task ID
            owner: Owner user ID
            **fields: Any of description, completed

        Returns:
            True if an owned task was updated
        """
        unknown = set(fields) - self.UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update task fields: {sorted(unknown)}")
        if not fields:
            return self.get_for_owner(task_id, owner) is not None

        if "description" in fields:
            fields["description"] = fields["description"].strip()
        if "completed" in fields:
            fields["completed"] = 1 if fields["completed"] else 0

        assignments = ", ".join(f"{column} = ?" for column in fields)
        cursor = self._execute(
            f"UPDATE tasks SET {assignments}, updated_at = ? WHERE id = ? AND owner = ?",
            (*fields.values(), utcnow(), task_id, owner)
        )
        self._commit()
        return cursor.rowcount > 0

    def delete(self, task_id: str, owner: str) -> bool:
        """Delete an owned task.

        Returns:
            True if the task existed, belonged to owner and was deleted
        """
        cursor = self._execute(
            "DELETE FROM tasks WHERE id = ? AND owner = ?",
            (task_id, owner)
        )
        self._commit()
        return cursor.rowcount > 0

    def count_for_owner(self, owner: str) -> int:
        cursor = self._execute(
            "SELECT COUNT(*) AS count FROM tasks WHERE owner = ?",
            (owner,)
        )
        row = cursor.fetchone()
        return row["count"] if row else 0

    def _task_from_row(self, row) -> dict | None:
        task = self._row_to_dict(row)
        if task is not None:
            task["completed"] = bool(task["completed"])
        return task
