"""User repository - handles all user-related database operations.

Tokens are stored separately, see TokenRepository.
"""
import uuid

import bcrypt

from ... import config
from ...database import utcnow
from .base import Repository


class UserRepository(Repository):
    """Repository for user entity operations.

    Examples:
        >>> repo = UserRepository(db)
        >>> user_id = repo.create("John Doe", "john@example.com", "hunter2!!")
        >>> user = repo.get_by_id(user_id)
    """

    # Columns callers may change through update()
    UPDATABLE_FIELDS = {"name", "email", "age"}

    def get_by_id(self, user_id: str) -> dict | None:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User dict or None if not found
        """
        cursor = self._execute(
            "SELECT * FROM users WHERE id = ?",
            (user_id,)
        )
        return self._row_to_dict(cursor.fetchone())

    def get_by_email(self, email: str) -> dict | None:
        """Get user by email (case-insensitive).

        Args:
            email: Email address to search

        Returns:
            User dict or None if not found
        """
        cursor = self._execute(
            "SELECT * FROM users WHERE email = ?",
            (email.lower().strip(),)
        )
        return self._row_to_dict(cursor.fetchone())

    def create(self, name: str, email: str, password: str, age: int = 0) -> str:
        """Create new user.

        Args:
            name: Display name
            email: Unique email address
            password: Plain text password (will be hashed)
            age: Age in years

        Returns:
            New user ID

        Raises:
            sqlite3.IntegrityError: If the email is already taken
        """
        user_id = uuid.uuid4().hex
        now = utcnow()

        self._execute(
            """INSERT INTO users
               (id, name, email, password_hash, age, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (user_id, name.strip(), email.lower().strip(),
             self._hash_password(password), age, now, now)
        )
        self._commit()
        return user_id

    def update(self, user_id: str, **fields) -> bool:
        """Update profile columns.

        Args:
            user_id: User ID
            **fields: Any of name, email, age

        Returns:
            True if user existed and was updated
        """
        unknown = set(fields) - self.UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update user fields: {sorted(unknown)}")
        if not fields:
            return self.get_by_id(user_id) is not None

        if "name" in fields:
            fields["name"] = fields["name"].strip()
        if "email" in fields:
            fields["email"] = fields["email"].lower().strip()

        assignments = ", ".join(f"{column} = ?" for column in fields)
        cursor = self._execute(
            f"UPDATE users SET {assignments}, updated_at = ? WHERE id = ?",
            (*fields.values(), utcnow(), user_id)
        )
        self._commit()
        return cursor.rowcount > 0

    def update_password(self, user_id: str, new_password: str) -> bool:
        """Update user password.

        Args:
            user_id: User ID
            new_password: New plain text password

        Returns:
            True if user existed and was updated
        """
        cursor = self._execute(
            "UPDATE users SET password_hash = ?, updated_at = ? WHERE id = ?",
            (self._hash_password(new_password), utcnow(), user_id)
        )
        self._commit()
        return cursor.rowcount > 0

    def delete(self, user_id: str) -> bool:
        """Delete user together with their tokens and tasks.

        All three deletes commit as one transaction.

        Args:
            user_id: User ID to delete

        Returns:
            True if user existed and was deleted
        """
        try:
            self._execute("DELETE FROM user_tokens WHERE user_id = ?", (user_id,))
            self._execute("DELETE FROM tasks WHERE owner = ?", (user_id,))
            cursor = self._execute("DELETE FROM users WHERE id = ?", (user_id,))
            self._commit()
        except Exception:
            self._rollback()
            raise
        return cursor.rowcount > 0

    def list_all(self) -> list[dict]:
        """List all users.

        Returns:
            List of user dicts (without password hashes)
        """
        cursor = self._execute(
            "SELECT id, name, email, age, created_at FROM users ORDER BY created_at"
        )
        return [dict(row) for row in cursor.fetchall()]

    def authenticate(self, email: str, password: str) -> dict | None:
        """Authenticate user with email and password.

        Args:
            email: Email address
            password: Plain text password

        Returns:
            User dict if authentication successful, None otherwise
        """
        user = self.get_by_email(email)
        if not user:
            return None

        if self._verify_password(password, user["password_hash"]):
            return user
        return None

    # Private helper methods

    def _hash_password(self, password: str) -> str:
        """Hash password using bcrypt."""
        hashed = bcrypt.hashpw(
            password.encode('utf-8'),
            bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
        )
        return hashed.decode('utf-8')

    def _verify_password(self, password: str, hashed: str) -> bool:
        """Verify password against a bcrypt hash."""
        try:
            return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
        except ValueError:
            return False
