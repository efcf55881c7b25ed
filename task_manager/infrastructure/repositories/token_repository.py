"""Token repository - handles the per-user list of issued tokens.

Every signed token handed to a client is recorded here. A token is only
accepted while its row exists, which is what makes logout work.
"""
from datetime import datetime

from ...database import utcnow
from .base import Repository


class TokenRepository(Repository):
    """Repository for issued bearer tokens.

    Append and remove are single statements, so concurrent logins and
    logouts for the same user never overwrite each other.

    Examples:
        >>> repo = TokenRepository(db)
        >>> repo.add(user_id, token)
        >>> repo.contains(user_id, token)
        True
        >>> repo.delete(user_id, token)  # logout
    """

    def add(self, user_id: str, token: str, expires_at: datetime | None = None) -> int:
        """Append token to the user's list.

        Args:
            user_id: Owner of the token
            token: Signed token string
            expires_at: When the token stops verifying, if known

        Returns:
            Row ID of the stored token
        """
        cursor = self._execute(
            """INSERT INTO user_tokens (user_id, token, created_at, expires_at)
               VALUES (?, ?, ?, ?)""",
            (user_id, token, utcnow(), expires_at)
        )
        self._commit()
        return cursor.lastrowid

    def list_for_user(self, user_id: str) -> list[str]:
        """List user's tokens in issue order.

        Args:
            user_id: User ID

        Returns:
            Token strings, oldest first
        """
        cursor = self._execute(
            "SELECT token FROM user_tokens WHERE user_id = ? ORDER BY id",
            (user_id,)
        )
        return [row["token"] for row in cursor.fetchall()]

    def contains(self, user_id: str, token: str) -> bool:
        """Check that token is still in the user's list."""
        cursor = self._execute(
            "SELECT 1 FROM user_tokens WHERE user_id = ? AND token = ?",
            (user_id, token)
        )
        return cursor.fetchone() is not None

    def delete(self, user_id: str, token: str) -> bool:
        """Remove one token (logout).

        Args:
            user_id: Owner of the token
            token: Token to remove

        Returns:
            True if the token existed and was removed
        """
        cursor = self._execute(
            "DELETE FROM user_tokens WHERE user_id = ? AND token = ?",
            (user_id, token)
        )
        self._commit()
        return cursor.rowcount > 0

    def delete_all_for_user(self, user_id: str) -> int:
        """Remove all tokens for user (logout everywhere).

        Args:
            user_id: User ID

        Returns:
            Number of tokens removed
        """
        cursor = self._execute(
            "DELETE FROM user_tokens WHERE user_id = ?",
            (user_id,)
        )
        self._commit()
        return cursor.rowcount

    def count_for_user(self, user_id: str) -> int:
        cursor = self._execute(
            "SELECT COUNT(*) AS count FROM user_tokens WHERE user_id = ?",
            (user_id,)
        )
        row = cursor.fetchone()
        return row["count"] if row else 0

    def cleanup_expired(self) -> int:
        """Delete all tokens past their expiry.

        Returns:
            Number of tokens cleaned up
        """
        cursor = self._execute(
            "DELETE FROM user_tokens WHERE expires_at IS NOT NULL AND expires_at <= ?",
            (utcnow(),)
        )
        self._commit()
        return cursor.rowcount
