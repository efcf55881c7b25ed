"""Signed bearer tokens (JWT, HS256 by default)."""
import secrets
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from ..errors import InvalidTokenError

# Claim holding the user ID
USER_ID_CLAIM = "_id"


class TokenIssuer:
    """Issues and verifies tokens bound to a user ID.

    Verification only checks signature and expiry. Whether a token is
    still accepted also depends on the owner's stored token list, which
    is the caller's concern.

    Examples:
        >>> issuer = TokenIssuer("secret", expires_hours=24)
        >>> token = issuer.issue("4f1c...")
        >>> issuer.decode(token)
        '4f1c...'
    """

    def __init__(self, secret: str, expires_hours: int | None = 24 * 7, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self.expires_hours = expires_hours

    def issue(self, user_id: str) -> str:
        """Sign a new token for user_id.

        Each call returns a distinct token, even within the same second.
        """
        now = datetime.now(timezone.utc)
        claims = {
            USER_ID_CLAIM: user_id,
            "iat": now,
            "jti": secrets.token_urlsafe(16),
        }
        if self.expires_hours is not None:
            claims["exp"] = now + timedelta(hours=self.expires_hours)
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> str:
        """Verify token and return the user ID it was issued for.

        Raises:
            InvalidTokenError: Bad signature, malformed, expired or no user ID
        """
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            raise InvalidTokenError() from e

        user_id = claims.get(USER_ID_CLAIM)
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError()
        return user_id

    def expires_at(self, token: str) -> datetime | None:
        """Expiry of a token this issuer produced, or None if it never expires."""
        claims = jwt.get_unverified_claims(token)
        exp = claims.get("exp")
        if exp is None:
            return None
        return datetime.fromtimestamp(exp, tz=timezone.utc)
