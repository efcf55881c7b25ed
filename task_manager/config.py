"""Application configuration and constants."""
import os
from pathlib import Path

from .errors import ConfigurationError

# Directory paths
BASE_DIR = Path(__file__).resolve().parent.parent

# Database location (override with TASK_MANAGER_DB)
DATABASE_PATH = Path(os.environ.get("TASK_MANAGER_DB", str(BASE_DIR / "tasks.db")))

# Token signing - JWT_SECRET has no default and is checked at startup
JWT_SECRET = os.environ.get("JWT_SECRET", "")
JWT_ALGORITHM = "HS256"
TOKEN_EXPIRY_HOURS = int(os.environ.get("TOKEN_EXPIRY_HOURS", str(24 * 7)))  # 7 days

# bcrypt work factor
BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

# Paths that don't require authentication
PUBLIC_PATHS = {"/docs", "/redoc", "/openapi.json"}

# (method, path) pairs that don't require authentication
PUBLIC_ROUTES = {("POST", "/users"), ("POST", "/users/login")}

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Server
HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", "3000"))


def check_config() -> None:
    """Fail fast when required settings are missing.

    Raises:
        ConfigurationError: If JWT_SECRET is not set
    """
    if not JWT_SECRET:
        raise ConfigurationError(
            "JWT_SECRET is not set. Export JWT_SECRET before starting the server."
        )
