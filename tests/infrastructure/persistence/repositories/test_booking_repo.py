"""Test the booking repository"""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from listings.infrastructure.persistence.repositories import BookingRepository


def _payload(listing_id="prop-1"):
    return {
        "listing_id": listing_id,
        "listing_kind": "PROPERTY",
        "check_in_date": datetime(2026, 11, 1, 12, tzinfo=UTC),
        "total_amount": Decimal("9000.00"),
    }


@pytest.fixture
def booking_repo(test_db):
    return BookingRepository(test_db)


async def test_create_defaults_to_pending(booking_repo, end_user):
    booking = await booking_repo.create(_payload(), user_id=end_user.id)

    assert booking.id
    assert booking.user_id == end_user.id
    assert booking.status == "pending"


async def test_list_filters_by_user(booking_repo, end_user, subadmin_user):
    await booking_repo.create(_payload("prop-1"), user_id=end_user.id)
    await booking_repo.create(_payload("prop-2"), user_id=end_user.id)
    await booking_repo.create(_payload("prop-3"), user_id=subadmin_user.id)
    await booking_repo.commit()

    mine, total = await booking_repo.list(filters={"user_id": end_user.id})
    everyone, overall = await booking_repo.list()

    assert total == 2
    assert {b.listing_id for b in mine} == {"prop-1", "prop-2"}
    assert overall == 3
    assert len(everyone) == 3
