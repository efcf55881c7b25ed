"""Database module.

This module contains only utility functions:
- Database connection management
- Database initialization
- Expired token cleanup

All CRUD operations live in repositories.
"""
import sqlite3
import threading
from datetime import datetime, timezone

from . import config


# =============================================================================
# SQLite3 datetime adapter (Python 3.12 compatibility)
# =============================================================================
def _adapt_datetime(dt: datetime) -> str:
    """Adapt datetime to ISO 8601 string for SQLite.

    Fixed precision keeps string ordering equal to time ordering.
    """
    return dt.isoformat(timespec="microseconds")

def _convert_datetime(val: bytes) -> datetime:
    """Convert ISO 8601 string from SQLite to datetime."""
    return datetime.fromisoformat(val.decode())

sqlite3.register_adapter(datetime, _adapt_datetime)
sqlite3.register_converter("DATETIME", _convert_datetime)
sqlite3.register_converter("TIMESTAMP", _convert_datetime)


def utcnow() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


# =============================================================================
# Database Connection
# =============================================================================
_connection_local = threading.local()


def connect() -> sqlite3.Connection:
    """Open a new connection with row factory and foreign keys enabled.

    The caller owns the connection and must close it.
    """
    conn = sqlite3.connect(
        config.DATABASE_PATH,
        detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
        check_same_thread=False
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_db() -> sqlite3.Connection:
    """Get thread-local database connection (CLI, startup and tests).

    Reconnects when DATABASE_PATH has changed since the thread connected.
    HTTP requests use connections from connect() instead.
    """
    conn = getattr(_connection_local, 'connection', None)
    if conn is not None and _connection_local.path != config.DATABASE_PATH:
        close_db()
        conn = None
    if conn is None:
        conn = connect()
        _connection_local.connection = conn
        _connection_local.path = config.DATABASE_PATH
    return conn


def close_db() -> None:
    """Close the connection owned by the current thread, if any."""
    conn = getattr(_connection_local, 'connection', None)
    if conn is not None:
        conn.close()
    _connection_local.connection = None


# =============================================================================
# Database Initialization
# =============================================================================
def init_db():
    """Initialize database with schema."""
    db = get_db()

    # Users table
    db.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT UNIQUE NOT NULL,
            password_hash TEXT NOT NULL,
            age INTEGER NOT NULL DEFAULT 0 CHECK(age >= 0),
            created_at TIMESTAMP NOT NULL,
            updated_at TIMESTAMP NOT NULL
        )
    """)

    # Issued tokens, one row per active session
    db.execute("""
        CREATE TABLE IF NOT EXISTS user_tokens (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            token TEXT NOT NULL UNIQUE,
            created_at TIMESTAMP NOT NULL,
            expires_at TIMESTAMP,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        )
    """)

    # Tasks table
    db.execute("""
        CREATE TABLE IF NOT EXISTS tasks (
            id TEXT PRIMARY KEY,
            description TEXT NOT NULL,
            completed INTEGER NOT NULL DEFAULT 0,
            owner TEXT NOT NULL,
            created_at TIMESTAMP NOT NULL,
            updated_at TIMESTAMP NOT NULL,
            FOREIGN KEY (owner) REFERENCES users(id) ON DELETE CASCADE
        )
    """)

    db.execute("""
        CREATE INDEX IF NOT EXISTS idx_user_tokens_user_id ON user_tokens(user_id)
    """)
    db.execute("""
        CREATE INDEX IF NOT EXISTS idx_tasks_owner ON tasks(owner)
    """)

    db.commit()


def cleanup_expired_tokens() -> int:
    """Delete stored tokens past their expiry.

    Returns:
        Number of tokens removed
    """
    from .infrastructure.repositories import TokenRepository

    return TokenRepository(get_db()).cleanup_expired()
