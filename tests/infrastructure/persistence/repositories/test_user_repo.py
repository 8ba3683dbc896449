"""Test user repository and subadmin store"""

import pytest

from listings.domain.exceptions import ValidationException
from listings.infrastructure.persistence.repositories import SubadminStore, UserRepository
from listings.shared.enums import Role


async def test_get_principal(test_db, subadmin_user):
    principal = await UserRepository(test_db).get_principal(subadmin_user.id)

    assert principal.id == subadmin_user.id
    assert principal.role == Role.SUBADMIN
    assert principal.permissions.can_delete is True


async def test_get_principal_unknown_id(test_db):
    assert await UserRepository(test_db).get_principal("missing") is None


async def test_email_lookup_is_case_insensitive(test_db, admin_user):
    user = await UserRepository(test_db).get_by_email("  ADMIN@example.com ")

    assert user.id == admin_user.id


async def test_duplicate_email_is_rejected(test_db, admin_user, password_hash):
    with pytest.raises(ValidationException):
        await UserRepository(test_db).create_user(
            username="another", email="admin@example.com",
            hashed_password=password_hash, role=Role.USER,
        )


async def test_role_defaults_apply(test_db, admin_user, end_user):
    assert admin_user.permissions == {
        "can_create": True, "can_read": True, "can_update": True, "can_delete": True,
    }
    assert end_user.permissions["can_create"] is False


async def test_subadmin_store_is_scoped_to_subadmins(test_db, admin_user, subadmin_user):
    store = SubadminStore(test_db)

    assert await store.get(admin_user.id) is None
    assert (await store.get(subadmin_user.id)).id == subadmin_user.id
    items, total = await store.list()
    assert total == 1
    assert items[0].id == subadmin_user.id


async def test_subadmin_delete_deactivates(test_db, subadmin_user):
    store = SubadminStore(test_db)

    assert await store.delete(subadmin_user.id, expected_version=subadmin_user.version) is True

    reloaded = await store.get(subadmin_user.id)
    assert reloaded is not None
    assert reloaded.is_active is False
    assert reloaded.version == 2
