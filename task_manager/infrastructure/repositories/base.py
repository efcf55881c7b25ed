"""Base repository protocol and utilities.

This module defines the interface that all repositories must implement.
"""
from typing import Protocol
import sqlite3


class ConnectionProtocol(Protocol):
    """Protocol for database connection."""
    
    def execute(self, sql: str, parameters: tuple = ...) -> sqlite3.Cursor: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...


class Repository:
    """Base repository class.
    
    All repositories should inherit from this class.
    
    Example:
        class TaskRepository(Repository):
            def get_by_id(self, task_id: str) -> dict | None:
                cursor = self._execute("SELECT * FROM tasks WHERE id = ?", (task_id,))
                return self._row_to_dict(cursor.fetchone())
    """
    
    def __init__(self, connection: ConnectionProtocol):
        """Initialize repository with database connection.
        
        Args:
            connection: Database connection (sqlite3.Connection or compatible)
        """
        self._conn = connection
    
    def _execute(self, sql: str, parameters: tuple = ()) -> sqlite3.Cursor:
        """Execute SQL query with parameters.
        
        Args:
            sql: SQL query string
            parameters: Query parameters (prevents SQL injection)
            
        Returns:
            sqlite3.Cursor with results
        """
        return self._conn.execute(sql, parameters)
    
    def _commit(self) -> None:
        """Commit current transaction."""
        self._conn.commit()
    
    def _rollback(self) -> None:
        """Roll back current transaction."""
        self._conn.rollback()
    
    def _row_to_dict(self, row: sqlite3.Row | None) -> dict | None:
        """Convert sqlite3.Row to dictionary.
        
        Args:
            row: Database row or None
            
        Returns:
            Dictionary representation or None
        """
        return dict(row) if row else None
