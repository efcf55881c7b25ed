"""Authentication service - bearer token verification and token bookkeeping."""
import logging
from typing import Optional, Tuple

from ...errors import InvalidTokenError, MissingTokenError, RevokedTokenError
from ...infrastructure.repositories import TokenRepository, UserRepository
from ...services.tokens import TokenIssuer

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class AuthService:
    """Service for authentication operations.

    Responsibilities:
    - Resolving a bearer token to its user
    - Issuing tokens and recording them against the user
    - Revoking one or all of a user's tokens
    """

    def __init__(
        self,
        user_repository: UserRepository,
        token_repository: TokenRepository,
        token_issuer: TokenIssuer
    ):
        self.user_repo = user_repository
        self.token_repo = token_repository
        self.issuer = token_issuer

    def authenticate(self, authorization: Optional[str]) -> Tuple[dict, str]:
        """Resolve an Authorization header to (user, token).

        Args:
            authorization: Raw header value, e.g. "Bearer eyJ..."

        Returns:
            Tuple of user dict and the exact token presented

        Raises:
            MissingTokenError: No bearer token present
            InvalidTokenError: Token fails verification or user is gone
            RevokedTokenError: Token is not in the user's token list
        """
        token = self.extract_bearer_token(authorization)
        if not token:
            raise MissingTokenError()

        user_id = self.issuer.decode(token)

        user = self.user_repo.get_by_id(user_id)
        if not user:
            logger.debug("Token for unknown user %s rejected", user_id)
            raise InvalidTokenError()

        if not self.token_repo.contains(user_id, token):
            logger.debug("Revoked token for user %s rejected", user_id)
            raise RevokedTokenError()

        return user, token

    def issue_token(self, user_id: str) -> str:
        """Issue a new token and append it to the user's token list.

        Args:
            user_id: User ID

        Returns:
            Signed token
        """
        token = self.issuer.issue(user_id)
        self.token_repo.add(user_id, token, expires_at=self.issuer.expires_at(token))
        return token

    def revoke_token(self, user_id: str, token: str) -> bool:
        """Remove a single token (logout).

        Returns:
            True if the token was present
        """
        return self.token_repo.delete(user_id, token)

    def revoke_all_tokens(self, user_id: str) -> int:
        """Remove every token of the user.

        Returns:
            Number of tokens removed
        """
        return self.token_repo.delete_all_for_user(user_id)

    @staticmethod
    def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
        """Pull the token out of "Bearer <token>", or None."""
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            return None
        token = authorization[len(BEARER_PREFIX):].strip()
        return token or None
