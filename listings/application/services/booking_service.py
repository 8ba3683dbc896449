"""
Booking service.

Any active principal may book an active listing. Each booking is recorded
as a BOOKING activity on the booked listing; reading another principal's
bookings is admin-only, and the admin-wide list is audited as a READ of
BOOKING.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from listings.domain.entities.activity import Pagination, RequestContext
from listings.domain.entities.principal import Principal
from listings.domain.exceptions import (ForbiddenError, MutationFailedError,
                                        PersistenceError, ResourceNotFoundException,
                                        UnauthorizedError, ValidationException)
from listings.shared.enums import (BOOKABLE_KINDS, ActivityAction, ActivityStatus,
                                   ResourceKind)
from listings.shared.telemetry.logging import get_logger
from listings.shared.telemetry.tracing import traced

if TYPE_CHECKING:
    from listings.application.interfaces.repositories import IResourceStore
    from listings.application.services.activity_service import ActivityService
    from listings.infrastructure.persistence.repositories import BookingRepository

logger = get_logger(__name__)


@dataclass
class BookingPage:
    items: list[Any]
    pagination: Pagination


class BookingService:
    def __init__(
        self,
        bookings: "BookingRepository",
        listings: Mapping[ResourceKind, "IResourceStore"],
        activity: "ActivityService",
        *,
        timeout: float = 10.0,
    ) -> None:
        self.bookings = bookings
        self.listings = listings
        self.activity = activity
        self.timeout = timeout

    @traced("booking.create")
    async def book(
        self,
        principal: Principal,
        payload: dict[str, Any],
        context: RequestContext | None = None,
    ) -> Any:
        """
        Book an active listing for ``principal``.

        ``payload`` carries ``listing_id`` and ``listing_kind`` plus the
        booking details. Raises ResourceNotFoundException when the listing
        is missing or inactive and MutationFailedError when the booking
        cannot be stored.
        """
        if not principal.is_active:
            raise UnauthorizedError()

        kind = ResourceKind(payload["listing_kind"])
        store = self.listings.get(kind)
        if kind not in BOOKABLE_KINDS or store is None:
            raise ValidationException(f"{kind.value} cannot be booked", field="listing_kind")
        check_in, check_out = payload["check_in_date"], payload.get("check_out_date")
        if check_out is not None and check_out < check_in:
            raise ValidationException(
                "check_out_date must not be before check_in_date", field="check_out_date"
            )

        listing_id = payload["listing_id"]
        listing = await self._bounded(store.get(listing_id))
        if listing is None or not listing.is_active:
            raise ResourceNotFoundException(kind.value, listing_id)

        try:
            booking = await self._bounded(
                self.bookings.create({**payload, "listing_kind": kind.value}, user_id=principal.id)
            )
            await self._bounded(self.bookings.commit())
        except PersistenceError as e:
            logger.warning("Booking of %s %s failed: %s", kind.value, listing_id, e.message)
            await self.activity.record(
                principal.id,
                ActivityAction.BOOKING,
                kind,
                listing_id,
                f"Booking failed: {e.message}",
                context,
                ActivityStatus.FAILED,
            )
            raise MutationFailedError(ResourceKind.BOOKING.value, "create", e.message) from e

        name = getattr(listing, "title", None) or getattr(listing, "name", listing_id)
        await self.activity.record(
            principal.id,
            ActivityAction.BOOKING,
            kind,
            listing_id,
            f"{principal.username or principal.id} booked {name} ({kind.value})",
            context,
        )
        return booking

    async def list_for_user(
        self,
        principal: Principal,
        user_id: str,
        page: int = 1,
        page_size: int = 10,
        context: RequestContext | None = None,
    ) -> BookingPage:
        """A principal's own bookings; admins may read anyone's."""
        if principal.id != user_id and not principal.is_admin:
            await self.activity.record(
                principal.id,
                ActivityAction.READ,
                ResourceKind.BOOKING,
                user_id,
                f"Denied read of bookings for user {user_id}",
                context,
                ActivityStatus.FAILED,
            )
            raise ForbiddenError("You can only view your own bookings", ResourceKind.BOOKING.value)
        return await self._page(page, page_size, {"user_id": user_id})

    async def list_all(
        self,
        principal: Principal,
        page: int = 1,
        page_size: int = 20,
        context: RequestContext | None = None,
    ) -> BookingPage:
        """Every booking, most recent first. Callers gate this to admins."""
        result = await self._page(page, page_size, {})
        await self.activity.record(
            principal.id,
            ActivityAction.READ,
            ResourceKind.BOOKING,
            detail=f"Retrieved bookings list (page {page})",
            context=context,
        )
        return result

    async def _page(self, page: int, page_size: int, filters: dict[str, Any]) -> BookingPage:
        if page < 1:
            raise ValidationException("page must be >= 1", field="page")
        if page_size < 1:
            raise ValidationException("limit must be >= 1", field="limit")
        items, total = await self._bounded(
            self.bookings.list(skip=(page - 1) * page_size, limit=page_size, filters=filters)
        )
        return BookingPage(items=list(items), pagination=Pagination.build(page, page_size, total))

    async def _bounded(self, awaitable):
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except TimeoutError as e:
            raise PersistenceError(
                f"Booking store call timed out after {self.timeout}s", "STORE_TIMEOUT"
            ) from e
