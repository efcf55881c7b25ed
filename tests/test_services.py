"""Tests for application services.

Tests the service layer business logic in isolation.
"""
import pytest
from unittest.mock import Mock

from task_manager.application.services import AuthService, TaskService, UserService
from task_manager.application.services.task_service import parse_sort
from task_manager.application.services.user_service import check_password
from task_manager.errors import (
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    NotFoundError,
    RevokedTokenError,
    ValidationError,
)


class TestAuthService:
    """Test AuthService token resolution."""

    @pytest.fixture
    def mock_user_repo(self):
        return Mock()

    @pytest.fixture
    def mock_token_repo(self):
        return Mock()

    @pytest.fixture
    def mock_issuer(self):
        issuer = Mock()
        issuer.decode.return_value = "user-1"
        return issuer

    @pytest.fixture
    def auth_service(self, mock_user_repo, mock_token_repo, mock_issuer):
        return AuthService(
            user_repository=mock_user_repo,
            token_repository=mock_token_repo,
            token_issuer=mock_issuer
        )

    @pytest.mark.parametrize("header", [None, "", "Bearer ", "Basic abc", "abc"])
    def test_missing_token(self, auth_service, mock_issuer, header):
        with pytest.raises(MissingTokenError):
            auth_service.authenticate(header)

        mock_issuer.decode.assert_not_called()

    def test_invalid_signature(self, auth_service, mock_issuer, mock_user_repo):
        mock_issuer.decode.side_effect = InvalidTokenError()

        with pytest.raises(InvalidTokenError):
            auth_service.authenticate("Bearer forged")

        mock_user_repo.get_by_id.assert_not_called()

    def test_unknown_user(self, auth_service, mock_user_repo):
        mock_user_repo.get_by_id.return_value = None

        with pytest.raises(InvalidTokenError):
            auth_service.authenticate("Bearer tok")

    def test_revoked_token(self, auth_service, mock_user_repo, mock_token_repo):
        mock_user_repo.get_by_id.return_value = {"id": "user-1"}
        mock_token_repo.contains.return_value = False

        with pytest.raises(RevokedTokenError):
            auth_service.authenticate("Bearer tok")

    def test_valid_token(self, auth_service, mock_user_repo, mock_token_repo):
        mock_user_repo.get_by_id.return_value = {"id": "user-1"}
        mock_token_repo.contains.return_value = True

        user, token = auth_service.authenticate("Bearer tok")

        assert user == {"id": "user-1"}
        assert token == "tok"
        mock_token_repo.contains.assert_called_once_with("user-1", "tok")

    def test_auth_errors_are_401(self):
        for error in (MissingTokenError(), InvalidTokenError(), RevokedTokenError()):
            assert error.status_code == 401

    def test_issue_token_records_it(self, auth_service, mock_issuer, mock_token_repo):
        mock_issuer.issue.return_value = "new-token"
        mock_issuer.expires_at.return_value = None

        assert auth_service.issue_token("user-1") == "new-token"
        mock_token_repo.add.assert_called_once_with("user-1", "new-token", expires_at=None)


class TestUserService:
    """Test UserService account logic."""

    @pytest.fixture
    def mock_user_repo(self):
        repo = Mock()
        repo.get_by_email.return_value = None
        return repo

    @pytest.fixture
    def mock_auth(self):
        auth = Mock()
        auth.issue_token.return_value = "issued-token"
        return auth

    @pytest.fixture
    def user_service(self, mock_user_repo, mock_auth):
        return UserService(user_repository=mock_user_repo, auth_service=mock_auth)

    def test_signup(self, user_service, mock_user_repo, mock_auth):
        mock_user_repo.create.return_value = "user-1"
        mock_user_repo.get_by_id.return_value = {"id": "user-1", "name": "Bob"}

        user, token = user_service.signup(" Bob ", "Bob@Example.com", "test1234")

        assert user["id"] == "user-1"
        assert token == "issued-token"
        mock_user_repo.create.assert_called_once_with("Bob", "bob@example.com", "test1234", 0)
        mock_auth.issue_token.assert_called_once_with("user-1")

    def test_signup_duplicate_email(self, user_service, mock_user_repo):
        mock_user_repo.get_by_email.return_value = {"id": "someone"}

        with pytest.raises(ValidationError):
            user_service.signup("Bob", "bob@example.com", "test1234")

        mock_user_repo.create.assert_not_called()

    @pytest.mark.parametrize("password", ["short", "password123", "MyPaSsWoRd!"])
    def test_signup_weak_password(self, user_service, mock_user_repo, password):
        with pytest.raises(ValidationError):
            user_service.signup("Bob", "bob@example.com", password)

        mock_user_repo.create.assert_not_called()

    def test_login_issues_new_token(self, user_service, mock_user_repo, mock_auth):
        mock_user_repo.authenticate.return_value = {"id": "user-1"}

        user, token = user_service.login("bob@example.com", "test1234")

        assert token == "issued-token"
        mock_auth.issue_token.assert_called_once_with("user-1")

    def test_login_trims_password_like_signup(self, user_service, mock_user_repo):
        mock_user_repo.authenticate.return_value = {"id": "user-1"}

        user_service.login("bob@example.com", "  test1234 ")

        mock_user_repo.authenticate.assert_called_once_with("bob@example.com", "test1234")

    def test_login_bad_credentials(self, user_service, mock_user_repo, mock_auth):
        mock_user_repo.authenticate.return_value = None

        with pytest.raises(InvalidCredentialsError) as exc_info:
            user_service.login("bob@example.com", "wrong")

        assert exc_info.value.status_code == 400
        mock_auth.issue_token.assert_not_called()

    def test_logout_revokes_presented_token(self, user_service, mock_auth):
        user_service.logout({"id": "user-1"}, "tok")

        mock_auth.revoke_token.assert_called_once_with("user-1", "tok")

    def test_update_profile_rejects_unknown_fields(self, user_service, mock_user_repo):
        with pytest.raises(ValidationError, match="Invalid updates"):
            user_service.update_profile({"id": "user-1"}, {"tokens": []})

        mock_user_repo.update.assert_not_called()

    def test_update_profile_rejects_nulls(self, user_service, mock_user_repo):
        with pytest.raises(ValidationError, match="Invalid updates"):
            user_service.update_profile({"id": "user-1"}, {"name": None})

        mock_user_repo.update.assert_not_called()

    def test_update_profile_password_rehashed(self, user_service, mock_user_repo):
        mock_user_repo.get_by_id.return_value = {"id": "user-1"}

        user_service.update_profile({"id": "user-1"}, {"password": "brand-new-1"})

        mock_user_repo.update_password.assert_called_once_with("user-1", "brand-new-1")

    def test_update_profile_keeps_own_email(self, user_service, mock_user_repo):
        mock_user_repo.get_by_email.return_value = {"id": "user-1"}
        mock_user_repo.get_by_id.return_value = {"id": "user-1"}

        user_service.update_profile({"id": "user-1"}, {"email": "bob@example.com"})

        mock_user_repo.update.assert_called_once_with("user-1", email="bob@example.com")

    def test_delete_account(self, user_service, mock_user_repo):
        user = {"id": "user-1"}

        assert user_service.delete_account(user) is user
        mock_user_repo.delete.assert_called_once_with("user-1")


class TestTaskService:
    """Test TaskService ownership and validation."""

    @pytest.fixture
    def mock_task_repo(self):
        return Mock()

    @pytest.fixture
    def task_service(self, mock_task_repo):
        return TaskService(task_repository=mock_task_repo)

    def test_create_task(self, task_service, mock_task_repo):
        mock_task_repo.create.return_value = "task-1"
        mock_task_repo.get_for_owner.return_value = {"id": "task-1"}

        assert task_service.create_task("user-1", " Write tests ") == {"id": "task-1"}
        mock_task_repo.create.assert_called_once_with(
            owner="user-1", description="Write tests", completed=False
        )

    def test_get_missing_task(self, task_service, mock_task_repo):
        mock_task_repo.get_for_owner.return_value = None

        with pytest.raises(NotFoundError):
            task_service.get_task("user-1", "task-1")

    def test_update_rejects_unknown_fields(self, task_service, mock_task_repo):
        with pytest.raises(ValidationError):
            task_service.update_task("user-1", "task-1", {"owner": "user-2"})

        mock_task_repo.update.assert_not_called()

    def test_update_rejects_nulls(self, task_service, mock_task_repo):
        with pytest.raises(ValidationError):
            task_service.update_task("user-1", "task-1", {"completed": None})

        mock_task_repo.update.assert_not_called()

    def test_update_accepts_false(self, task_service, mock_task_repo):
        mock_task_repo.update.return_value = True

        task_service.update_task("user-1", "task-1", {"completed": False})

        mock_task_repo.update.assert_called_once_with("task-1", "user-1", completed=False)

    def test_update_not_owned(self, task_service, mock_task_repo):
        mock_task_repo.update.return_value = False

        with pytest.raises(NotFoundError):
            task_service.update_task("user-1", "task-1", {"completed": True})

    def test_delete_not_owned(self, task_service, mock_task_repo):
        mock_task_repo.get_for_owner.return_value = None

        with pytest.raises(NotFoundError):
            task_service.delete_task("user-1", "task-1")

        mock_task_repo.delete.assert_not_called()

    def test_list_passes_parsed_sort(self, task_service, mock_task_repo):
        mock_task_repo.list_for_owner.return_value = []

        task_service.list_tasks("user-1", completed=True, limit=5, skip=10, sort_by="createdAt:desc")

        mock_task_repo.list_for_owner.assert_called_once_with(
            "user-1", completed=True, limit=5, skip=10,
            order_by="created_at", descending=True
        )


@pytest.mark.parametrize("sort_by, expected", [
    (None, ("created_at", False)),
    ("created_at", ("created_at", False)),
    ("updatedAt:desc", ("updated_at", True)),
    ("completed:ASC", ("completed", False)),
])
def test_parse_sort(sort_by, expected):
    assert parse_sort(sort_by) == expected


@pytest.mark.parametrize("sort_by", ["owner:asc", "created_at:sideways"])
def test_parse_sort_rejects(sort_by):
    with pytest.raises(ValidationError):
        parse_sort(sort_by)


@pytest.mark.parametrize("password", ["x" * 73, "é" * 37])
def test_check_password_rejects_over_72_bytes(password):
    with pytest.raises(ValidationError, match="72 bytes"):
        check_password(password)


def test_check_password_accepts_72_bytes():
    assert check_password("x" * 72) == "x" * 72
