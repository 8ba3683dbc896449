from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from listings.application.gateways import GamingZoneGateway
from listings.application.services import CatalogService
from listings.domain.entities.activity import RequestContext
from listings.domain.entities.principal import Principal
from listings.presentation.api.dependencies import (get_current_principal,
                                                    get_gaming_zone_catalog,
                                                    get_gaming_zone_gateway,
                                                    get_request_context)
from listings.presentation.api.v1.schemas.listing import (GamingZoneCreate,
                                                          GamingZoneEnvelope,
                                                          GamingZoneListResponse,
                                                          GamingZoneResponse,
                                                          GamingZoneUpdate,
                                                          MessageResponse)

router = APIRouter()


@router.post("/", response_model=GamingZoneEnvelope, status_code=status.HTTP_201_CREATED)
async def create_gaming_zone(
    data: GamingZoneCreate,
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[GamingZoneGateway, Depends(get_gaming_zone_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    """Create a gaming zone owned by the caller (requires can_create)"""
    result = await gateway.create(principal, data.model_dump(), context)
    return GamingZoneEnvelope(
        message="Gaming zone created successfully",
        gaming_zone=GamingZoneResponse.model_validate(result.resource),
    )


@router.get("/", response_model=GamingZoneListResponse)
async def list_gaming_zones(
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[GamingZoneGateway, Depends(get_gaming_zone_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    search: str | None = None,
    is_active: bool | None = None,
    created_by: str | None = None,
):
    """List gaming zones, most recent first"""
    result = await gateway.list(
        principal,
        page,
        limit,
        {"search": search, "is_active": is_active, "created_by": created_by},
        context,
    )
    return GamingZoneListResponse(
        gaming_zones=[GamingZoneResponse.model_validate(item) for item in result.items],
        pagination=result.pagination.to_dict(),
    )


@router.get("/public", response_model=GamingZoneListResponse)
async def browse_gaming_zones(
    catalog: Annotated[CatalogService, Depends(get_gaming_zone_catalog)],
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    search: str | None = None,
):
    """Active gaming zones, no token required"""
    result = await catalog.browse(page, limit, search)
    return GamingZoneListResponse(
        gaming_zones=[GamingZoneResponse.model_validate(item) for item in result.items],
        pagination=result.pagination.to_dict(),
    )


@router.get("/public/{zone_id}", response_model=GamingZoneEnvelope)
async def view_gaming_zone(
    zone_id: str,
    catalog: Annotated[CatalogService, Depends(get_gaming_zone_catalog)],
):
    zone = await catalog.view(zone_id)
    return GamingZoneEnvelope(gaming_zone=GamingZoneResponse.model_validate(zone))


@router.get("/{zone_id}", response_model=GamingZoneEnvelope)
async def get_gaming_zone(
    zone_id: str,
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[GamingZoneGateway, Depends(get_gaming_zone_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    zone = await gateway.get(principal, zone_id, context)
    return GamingZoneEnvelope(gaming_zone=GamingZoneResponse.model_validate(zone))


@router.put("/{zone_id}", response_model=GamingZoneEnvelope)
async def update_gaming_zone(
    zone_id: str,
    data: GamingZoneUpdate,
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[GamingZoneGateway, Depends(get_gaming_zone_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    result = await gateway.update(
        principal, zone_id, data.model_dump(exclude_unset=True, exclude_none=True), context
    )
    return GamingZoneEnvelope(
        message="Gaming zone updated successfully",
        gaming_zone=GamingZoneResponse.model_validate(result.resource),
    )


@router.delete("/{zone_id}", response_model=MessageResponse)
async def delete_gaming_zone(
    zone_id: str,
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[GamingZoneGateway, Depends(get_gaming_zone_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    await gateway.delete(principal, zone_id, context)
    return MessageResponse(message="Gaming zone deleted successfully")
