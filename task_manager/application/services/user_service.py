"""User service - signup, login, sessions and profile management.

This service owns the account lifecycle. Token verification itself lives
in AuthService, which this service uses to issue and revoke tokens.
"""
import logging
import sqlite3
from typing import Any, Dict, Tuple

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ...errors import InvalidCredentialsError, ValidationError
from ...infrastructure.repositories import UserRepository
from .auth_service import AuthService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 7
# bcrypt only accepts up to 72 bytes of input
MAX_PASSWORD_BYTES = 72
ALLOWED_PROFILE_UPDATES = {"name", "email", "password", "age"}

_email_adapter = TypeAdapter(EmailStr)


def normalize_email(email: str) -> str:
    """Validate an email address and return it trimmed and lower-cased.

    Raises:
        ValidationError: If the address is malformed
    """
    try:
        _email_adapter.validate_python(email.strip())
    except PydanticValidationError:
        raise ValidationError("Email is invalid")
    return email.strip().lower()


def check_password(password: str) -> str:
    """Enforce password rules and return the trimmed password.

    Raises:
        ValidationError: Too short, too long, or contains the word "password"
    """
    password = password.strip()
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
        )
    if "password" in password.lower():
        raise ValidationError('Password cannot contain "password"')
    return password


def check_name(name: str) -> str:
    name = name.strip()
    if not name:
        raise ValidationError("Name is required")
    return name


def check_age(age: int) -> int:
    if age < 0:
        raise ValidationError("Age must be a positive number")
    return age


class UserService:
    """Service for user account operations.

    Responsibilities:
    - Signup and login (token issue)
    - Logout of one session or all sessions
    - Profile read, update and account deletion
    """

    def __init__(
        self,
        user_repository: UserRepository,
        auth_service: AuthService
    ):
        self.user_repo = user_repository
        self.auth = auth_service

    def signup(
        self,
        name: str,
        email: str,
        password: str,
        age: int = 0
    ) -> Tuple[dict, str]:
        """Create an account and its first token.

        Args:
            name: Display name
            email: Email address (unique)
            password: Plain text password
            age: Age in years

        Returns:
            Tuple of (user dict, token)

        Raises:
            ValidationError: Invalid input or email already registered
        """
        name = check_name(name)
        email = normalize_email(email)
        password = check_password(password)
        age = check_age(age)

        if self.user_repo.get_by_email(email):
            raise ValidationError("Email is already in use")

        try:
            user_id = self.user_repo.create(name, email, password, age)
        except sqlite3.IntegrityError:
            # Lost a race with a concurrent signup for the same email
            raise ValidationError("Email is already in use")

        token = self.auth.issue_token(user_id)
        logger.info("Registered user %s", user_id)
        return self.user_repo.get_by_id(user_id), token

    def login(self, email: str, password: str) -> Tuple[dict, str]:
        """Verify credentials and issue an additional token.

        Earlier tokens stay valid, so each device keeps its own session.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
        """
        # Stored hashes are of the trimmed password
        user = self.user_repo.authenticate(email, password.strip())
        if not user:
            logger.info("Failed login attempt")
            raise InvalidCredentialsError()

        token = self.auth.issue_token(user["id"])
        logger.info("Login: %s", user["id"])
        return user, token

    def logout(self, user: dict, token: str) -> None:
        """End the session that presented token."""
        self.auth.revoke_token(user["id"], token)
        logger.info("Logout: %s", user["id"])

    def logout_all(self, user: dict) -> int:
        """End every session of the user.

        Returns:
            Number of tokens revoked
        """
        count = self.auth.revoke_all_tokens(user["id"])
        logger.info("Logout everywhere: %s (%d sessions)", user["id"], count)
        return count

    def get_profile(self, user: dict) -> dict:
        return user

    def update_profile(self, user: dict, updates: Dict[str, Any]) -> dict:
        """Apply profile changes.

        Args:
            user: Authenticated user dict
            updates: Any of name, email, password, age

        Returns:
            Updated user dict

        Raises:
            ValidationError: Unknown or null fields, invalid values or email taken
        """
        if not set(updates) <= ALLOWED_PROFILE_UPDATES or None in updates.values():
            raise ValidationError("Invalid updates!")

        fields = {}
        if "name" in updates:
            fields["name"] = check_name(updates["name"])
        if "age" in updates:
            fields["age"] = check_age(updates["age"])
        if "email" in updates:
            email = normalize_email(updates["email"])
            existing = self.user_repo.get_by_email(email)
            if existing and existing["id"] != user["id"]:
                raise ValidationError("Email is already in use")
            fields["email"] = email
        new_password = None
        if "password" in updates:
            new_password = check_password(updates["password"])

        try:
            self.user_repo.update(user["id"], **fields)
        except sqlite3.IntegrityError:
            raise ValidationError("Email is already in use")
        if new_password is not None:
            self.user_repo.update_password(user["id"], new_password)

        return self.user_repo.get_by_id(user["id"])

    def delete_account(self, user: dict) -> dict:
        """Delete the user, their tokens and their tasks.

        Returns:
            The deleted user dict
        """
        self.user_repo.delete(user["id"])
        logger.info("Deleted user %s", user["id"])
        return user
