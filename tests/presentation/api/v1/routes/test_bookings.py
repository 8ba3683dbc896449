"""Test booking endpoints and the public catalog"""

import pytest
from fastapi import status

from listings.domain.entities.activity import ActivityFilter
from listings.infrastructure.persistence.repositories import ActivityRepository
from listings.shared.enums import ActivityAction, ActivityStatus

PROPERTY_DATA = {"title": "Sunrise PG", "price": 4500, "location": "Pune"}

BOOKING_DATA = {
    "check_in_date": "2026-11-01T12:00:00Z",
    "check_out_date": "2026-11-03T12:00:00Z",
    "total_amount": "9000.00",
    "contact_phone": "9876543210",
    "contact_email": "Guest@Example.com",
}


async def create_property(client, headers, **overrides):
    response = await client.post(
        "/api/v1/properties/", json={**PROPERTY_DATA, **overrides}, headers=headers
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["property"]


async def records_for(session_factory, action):
    return await ActivityRepository(session_factory).find(
        ActivityFilter(action=action), offset=0, limit=50
    )


class TestPublicCatalog:
    async def test_lists_only_active_properties_without_token(self, client, subadmin_headers):
        visible = await create_property(client, subadmin_headers)
        hidden = await create_property(client, subadmin_headers, title="Closed PG")
        response = await client.put(
            f"/api/v1/properties/{hidden['id']}", json={"is_active": False}, headers=subadmin_headers
        )
        assert response.status_code == 200

        response = await client.get("/api/v1/properties/public")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [p["id"] for p in data["properties"]] == [visible["id"]]
        assert data["pagination"]["total"] == 1

    async def test_inactive_property_is_not_found(self, client, subadmin_headers):
        prop = await create_property(client, subadmin_headers)
        await client.put(
            f"/api/v1/properties/{prop['id']}", json={"is_active": False}, headers=subadmin_headers
        )

        response = await client.get(f"/api/v1/properties/public/{prop['id']}")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_public_reads_are_not_audited(self, client, subadmin_headers, session_factory):
        prop = await create_property(client, subadmin_headers)

        response = await client.get(f"/api/v1/properties/public/{prop['id']}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["property"]["title"] == "Sunrise PG"
        assert await records_for(session_factory, ActivityAction.READ) == []

    @pytest.mark.parametrize("path, key", [
        ("/api/v1/messes/public", "messes"),
        ("/api/v1/gaming-zones/public", "gaming_zones"),
    ])
    async def test_other_kinds_are_browsable(self, client, path, key):
        response = await client.get(path)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()[key] == []


class TestCreateBooking:
    async def test_end_user_books_property(
        self, client, end_user, headers_for, subadmin_headers, session_factory
    ):
        """
        GIVEN an active property
        WHEN an end user books it
        THEN 201 is returned and a SUCCESS BOOKING record names the property.
        """
        prop = await create_property(client, subadmin_headers)

        response = await client.post(
            "/api/v1/bookings/",
            json={**BOOKING_DATA, "listing_id": prop["id"], "listing_kind": "PROPERTY"},
            headers=headers_for(end_user),
        )

        assert response.status_code == status.HTTP_201_CREATED, response.text
        data = response.json()
        assert data["message"] == "Booking created successfully"
        assert data["booking"]["user_id"] == end_user.id
        assert data["booking"]["status"] == "pending"
        assert data["booking"]["contact_email"] == "guest@example.com"

        [record] = await records_for(session_factory, ActivityAction.BOOKING)
        assert record.actor_id == end_user.id
        assert record.resource_kind == "PROPERTY"
        assert record.resource_id == prop["id"]
        assert record.status == ActivityStatus.SUCCESS

    async def test_booking_requires_token(self, client):
        response = await client.post(
            "/api/v1/bookings/",
            json={**BOOKING_DATA, "listing_id": "x", "listing_kind": "PROPERTY"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_missing_listing_is_not_found(self, client, end_user, headers_for):
        response = await client.post(
            "/api/v1/bookings/",
            json={**BOOKING_DATA, "listing_id": "missing", "listing_kind": "MESS"},
            headers=headers_for(end_user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_check_out_before_check_in_is_rejected(self, client, end_user, headers_for):
        response = await client.post(
            "/api/v1/bookings/",
            json={
                **BOOKING_DATA,
                "check_out_date": "2026-10-30T12:00:00Z",
                "listing_id": "x",
                "listing_kind": "PROPERTY",
            },
            headers=headers_for(end_user),
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestListBookings:
    async def book(self, client, headers, listing_id):
        response = await client.post(
            "/api/v1/bookings/",
            json={**BOOKING_DATA, "listing_id": listing_id, "listing_kind": "PROPERTY"},
            headers=headers,
        )
        assert response.status_code == status.HTTP_201_CREATED, response.text

    async def test_admin_lists_all_and_is_audited(
        self, client, end_user, headers_for, subadmin_headers, admin_user, admin_headers,
        session_factory,
    ):
        prop = await create_property(client, subadmin_headers)
        await self.book(client, headers_for(end_user), prop["id"])

        response = await client.get("/api/v1/bookings/all", headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()["bookings"]) == 1
        reads = [
            r for r in await records_for(session_factory, ActivityAction.READ)
            if r.resource_kind == "BOOKING"
        ]
        assert [(r.actor_id, r.status) for r in reads] == [(admin_user.id, ActivityStatus.SUCCESS)]

    async def test_subadmin_cannot_list_all(self, client, subadmin_headers):
        response = await client.get("/api/v1/bookings/all", headers=subadmin_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_user_lists_own_bookings(
        self, client, end_user, headers_for, subadmin_headers
    ):
        prop = await create_property(client, subadmin_headers)
        await self.book(client, headers_for(end_user), prop["id"])

        response = await client.get(
            f"/api/v1/bookings/user/{end_user.id}", headers=headers_for(end_user)
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["pagination"]["total"] == 1

    async def test_user_cannot_list_someone_elses_bookings(
        self, client, end_user, subadmin_user, headers_for, session_factory
    ):
        response = await client.get(
            f"/api/v1/bookings/user/{subadmin_user.id}", headers=headers_for(end_user)
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        [record] = await records_for(session_factory, ActivityAction.READ)
        assert record.status == ActivityStatus.FAILED
        assert record.resource_kind == "BOOKING"
