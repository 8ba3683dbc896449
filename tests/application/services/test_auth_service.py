from unittest.mock import AsyncMock

import pytest

from listings.application.services import AuthService
from listings.domain.entities.principal import PermissionVector
from listings.domain.exceptions import AuthenticationException, UnauthorizedError
from listings.infrastructure.persistence.models import User
from listings.infrastructure.security.jwt import verify_token
from listings.infrastructure.security.password import get_password_hash
from listings.shared.enums import ActivityAction, ActivityStatus, Role

PASSWORD = "correct-horse"


@pytest.fixture(scope="module")
def stored_hash():
    return get_password_hash(PASSWORD)


@pytest.fixture
def account(stored_hash):
    return User(
        id="user-1",
        username="sub",
        email="sub@example.com",
        hashed_password=stored_hash,
        role=Role.SUBADMIN.value,
        is_active=True,
        permissions=PermissionVector.read_only().to_dict(),
    )


@pytest.fixture
def user_repo(account):
    repo = AsyncMock()
    repo.get_by_email = AsyncMock(return_value=account)
    return repo


@pytest.fixture
def auth_service(user_repo, activity_service):
    return AuthService(user_repo, activity_service)


class TestLogin:
    async def test_success_issues_token_and_records_login(
        self, auth_service, user_repo, account, activity_store
    ):
        result = await auth_service.login("sub@example.com", PASSWORD)

        claims = verify_token(result.access_token)
        assert claims["sub"] == "user-1"
        assert claims["role"] == "subadmin"
        assert result.account is account
        user_repo.record_login.assert_awaited_once_with(account)

        [record] = activity_store.records
        assert (record.action, record.status) == (ActivityAction.LOGIN, ActivityStatus.SUCCESS)

    async def test_unknown_email_records_failed_login_without_actor(
        self, auth_service, user_repo, activity_store
    ):
        user_repo.get_by_email.return_value = None

        with pytest.raises(AuthenticationException):
            await auth_service.login("ghost@example.com", PASSWORD)

        [record] = activity_store.records
        assert record.actor_id is None
        assert record.status == ActivityStatus.FAILED

    async def test_wrong_password_records_failed_login(self, auth_service, activity_store):
        with pytest.raises(AuthenticationException):
            await auth_service.login("sub@example.com", "wrong")

        [record] = activity_store.records
        assert record.actor_id == "user-1"
        assert record.status == ActivityStatus.FAILED
        assert record.detail == "Invalid password"

    async def test_inactive_account_is_unauthorized(self, auth_service, account, user_repo):
        account.is_active = False

        with pytest.raises(UnauthorizedError):
            await auth_service.login("sub@example.com", PASSWORD)

        user_repo.record_login.assert_not_awaited()


async def test_logout_records_activity(auth_service, account, activity_store):
    await auth_service.logout(account.to_principal())

    [record] = activity_store.records
    assert record.action == ActivityAction.LOGOUT


async def test_signup_creates_user_role(auth_service, user_repo, account, activity_store):
    """
    GIVEN a signup request
    WHEN the account is created
    THEN the repository is asked for a role=user account and SIGNUP is recorded.
    """
    user_repo.create_user = AsyncMock(return_value=account)

    await auth_service.signup("newbie", "new@example.com", "secret123")

    kwargs = user_repo.create_user.await_args.kwargs
    assert kwargs["role"] == Role.USER
    assert kwargs["hashed_password"] != "secret123"
    assert activity_store.records[0].action == ActivityAction.SIGNUP
