from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from listings.application.services import AuthorizationService, BookingService
from listings.domain.entities.activity import RequestContext
from listings.domain.entities.principal import Principal
from listings.presentation.api.dependencies import (get_authorization_service,
                                                    get_booking_service,
                                                    get_current_principal,
                                                    get_request_context,
                                                    require_admin)
from listings.presentation.api.v1.schemas.booking import (BookingCreate,
                                                          BookingEnvelope,
                                                          BookingListResponse,
                                                          BookingResponse)
from listings.shared.enums import Action, ResourceKind

router = APIRouter()


def _to_response(result) -> BookingListResponse:
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(item) for item in result.items],
        pagination=result.pagination.to_dict(),
    )


@router.post("/", response_model=BookingEnvelope, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    principal: Annotated[Principal, Depends(get_current_principal)],
    bookings: Annotated[BookingService, Depends(get_booking_service)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    """Book an active property, mess or gaming zone"""
    booking = await bookings.book(principal, data.model_dump(), context)
    return BookingEnvelope(
        message="Booking created successfully",
        booking=BookingResponse.model_validate(booking),
    )


@router.get("/all", response_model=BookingListResponse)
async def list_all_bookings(
    principal: Annotated[Principal, Depends(require_admin)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    bookings: Annotated[BookingService, Depends(get_booking_service)],
    context: Annotated[RequestContext, Depends(get_request_context)],
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    """Every booking, most recent first (admin only)"""
    authz.require(principal, Action.READ, ResourceKind.BOOKING)
    return _to_response(await bookings.list_all(principal, page, limit, context))


@router.get("/user/{user_id}", response_model=BookingListResponse)
async def list_user_bookings(
    user_id: str,
    principal: Annotated[Principal, Depends(get_current_principal)],
    bookings: Annotated[BookingService, Depends(get_booking_service)],
    context: Annotated[RequestContext, Depends(get_request_context)],
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    return _to_response(await bookings.list_for_user(principal, user_id, page, limit, context))
