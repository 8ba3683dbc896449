"""Test listing repositories"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from listings.domain.exceptions import PersistenceError
from listings.infrastructure.persistence.repositories import (MessRepository,
                                                              PropertyRepository)


@pytest.fixture
def property_repo(test_db):
    return PropertyRepository(test_db)


async def test_create_sets_owner_and_version(property_repo, subadmin_user):
    prop = await property_repo.create(
        {"title": "Sunrise PG", "price": Decimal("4500"), "location": "Pune"},
        created_by=subadmin_user.id,
    )

    assert prop.id
    assert prop.created_by == subadmin_user.id
    assert prop.version == 1
    assert prop.is_active is True


async def test_update_is_conditional_on_version(property_repo, subadmin_user):
    """
    GIVEN a stored property at version 1
    WHEN it is updated with the right and then a stale version
    THEN the first write applies and bumps the version, the second returns None.
    """
    prop = await property_repo.create(
        {"title": "Sunrise PG", "price": Decimal("4500"), "location": "Pune"},
        created_by=subadmin_user.id,
    )

    updated = await property_repo.update(prop.id, {"title": "Sunrise PG+"}, expected_version=1)
    stale = await property_repo.update(prop.id, {"title": "Lost write"}, expected_version=1)

    assert updated.title == "Sunrise PG+"
    assert updated.version == 2
    assert stale is None
    assert (await property_repo.get(prop.id)).title == "Sunrise PG+"


async def test_delete_is_conditional_on_version(property_repo, subadmin_user):
    prop = await property_repo.create(
        {"title": "Gone PG", "price": Decimal("100"), "location": "Goa"},
        created_by=subadmin_user.id,
    )

    assert await property_repo.delete(prop.id, expected_version=7) is False
    assert await property_repo.delete(prop.id, expected_version=1) is True
    assert await property_repo.get(prop.id) is None


async def test_list_filters_and_counts(test_db, subadmin_user, other_subadmin):
    repo = MessRepository(test_db)
    await repo.create({"name": "Annapurna", "location": "Pune"}, created_by=subadmin_user.id)
    await repo.create({"name": "Tiffin Hub", "location": "Pune"}, created_by=subadmin_user.id)
    await repo.create({"name": "Annapurna 2", "location": "Mumbai"}, created_by=other_subadmin.id)

    mine, mine_total = await repo.list(filters={"created_by": subadmin_user.id})
    searched, searched_total = await repo.list(filters={"search": "annapurna"})
    first_page, total = await repo.list(skip=0, limit=2)

    assert mine_total == 2
    assert {m.name for m in mine} == {"Annapurna", "Tiffin Hub"}
    assert searched_total == 2
    assert len(first_page) == 2
    assert total == 3


async def test_driver_error_is_wrapped(property_repo, subadmin_user):
    with pytest.raises(PersistenceError):
        await property_repo.create({"title": None, "price": 1, "location": "X"}, created_by=subadmin_user.id)


async def test_commit_failure_rolls_back_and_raises():
    session = AsyncMock()
    session.commit.side_effect = OperationalError("COMMIT", {}, Exception("disk I/O error"))
    repo = PropertyRepository(session)

    with pytest.raises(PersistenceError, match="Failed to commit Property"):
        await repo.commit()

    session.rollback.assert_awaited_once()
