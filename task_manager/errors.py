"""Application error types.

Services raise these; ``main`` turns every ``AppError`` into a JSON
response with the matching status code.
"""


class ConfigurationError(RuntimeError):
    """Required configuration is missing or invalid. Fatal at startup."""


class AppError(Exception):
    """Base class for errors surfaced to HTTP clients."""

    status_code = 500
    detail = "Internal server error"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class ValidationError(AppError):
    """Malformed or conflicting input the client can fix."""

    status_code = 400
    detail = "Invalid request"


class NotFoundError(AppError):
    """Resource is absent or belongs to someone else."""

    status_code = 404
    detail = "Not found"


class AuthError(AppError):
    status_code = 401
    detail = "Please authenticate."


class MissingTokenError(AuthError):
    """No bearer token on a protected request."""


class InvalidTokenError(AuthError):
    """Bad signature, expired token, or unknown user."""


class RevokedTokenError(AuthError):
    """Token verifies but is no longer in the user's token list."""


class InvalidCredentialsError(AuthError):
    """Login failed. Same message for unknown email and wrong password."""

    status_code = 400
    detail = "Unable to login"
