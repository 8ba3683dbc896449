from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from listings.application.gateways import PropertyGateway
from listings.application.services import CatalogService
from listings.domain.entities.activity import RequestContext
from listings.domain.entities.principal import Principal
from listings.presentation.api.dependencies import (get_current_principal,
                                                    get_property_catalog,
                                                    get_property_gateway,
                                                    get_request_context)
from listings.presentation.api.v1.schemas.listing import (MessageResponse,
                                                          PropertyCreate,
                                                          PropertyEnvelope,
                                                          PropertyListResponse,
                                                          PropertyResponse,
                                                          PropertyUpdate)

router = APIRouter()


@router.post("/", response_model=PropertyEnvelope, status_code=status.HTTP_201_CREATED)
async def create_property(
    data: PropertyCreate,
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[PropertyGateway, Depends(get_property_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    """Create a property owned by the caller (requires can_create)"""
    result = await gateway.create(principal, data.model_dump(), context)
    return PropertyEnvelope(
        message="Property created successfully",
        property=PropertyResponse.model_validate(result.resource),
    )


@router.get("/", response_model=PropertyListResponse)
async def list_properties(
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[PropertyGateway, Depends(get_property_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    search: str | None = None,
    is_active: bool | None = None,
    created_by: str | None = None,
):
    """List properties, most recent first"""
    result = await gateway.list(
        principal,
        page,
        limit,
        {"search": search, "is_active": is_active, "created_by": created_by},
        context,
    )
    return PropertyListResponse(
        properties=[PropertyResponse.model_validate(item) for item in result.items],
        pagination=result.pagination.to_dict(),
    )


@router.get("/public", response_model=PropertyListResponse)
async def browse_properties(
    catalog: Annotated[CatalogService, Depends(get_property_catalog)],
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    search: str | None = None,
):
    """Active properties, no token required"""
    result = await catalog.browse(page, limit, search)
    return PropertyListResponse(
        properties=[PropertyResponse.model_validate(item) for item in result.items],
        pagination=result.pagination.to_dict(),
    )


@router.get("/public/{property_id}", response_model=PropertyEnvelope)
async def view_property(
    property_id: str,
    catalog: Annotated[CatalogService, Depends(get_property_catalog)],
):
    prop = await catalog.view(property_id)
    return PropertyEnvelope(property=PropertyResponse.model_validate(prop))


@router.get("/{property_id}", response_model=PropertyEnvelope)
async def get_property(
    property_id: str,
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[PropertyGateway, Depends(get_property_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    prop = await gateway.get(principal, property_id, context)
    return PropertyEnvelope(property=PropertyResponse.model_validate(prop))


@router.put("/{property_id}", response_model=PropertyEnvelope)
async def update_property(
    property_id: str,
    data: PropertyUpdate,
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[PropertyGateway, Depends(get_property_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    """
    Update a property.

    Admins need can_update; subadmins additionally need to own the property.
    """
    result = await gateway.update(
        principal, property_id, data.model_dump(exclude_unset=True, exclude_none=True), context
    )
    return PropertyEnvelope(
        message="Property updated successfully",
        property=PropertyResponse.model_validate(result.resource),
    )


@router.delete("/{property_id}", response_model=MessageResponse)
async def delete_property(
    property_id: str,
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[PropertyGateway, Depends(get_property_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    await gateway.delete(principal, property_id, context)
    return MessageResponse(message="Property deleted successfully")
