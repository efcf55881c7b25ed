"""Task Manager API - users, bearer tokens and owner-scoped tasks."""

__version__ = "1.0.0"
