from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from listings.application.gateways import SubadminGateway
from listings.domain.entities.activity import RequestContext
from listings.domain.entities.principal import Principal
from listings.presentation.api.dependencies import (get_current_principal,
                                                    get_request_context,
                                                    get_subadmin_gateway)
from listings.presentation.api.v1.schemas.listing import MessageResponse
from listings.presentation.api.v1.schemas.principal import (PrincipalResponse,
                                                            SubadminCreate,
                                                            SubadminEnvelope,
                                                            SubadminListResponse,
                                                            SubadminUpdate)

router = APIRouter()


@router.post("/", response_model=SubadminEnvelope, status_code=status.HTTP_201_CREATED)
async def create_subadmin(
    data: SubadminCreate,
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[SubadminGateway, Depends(get_subadmin_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    """
    Create a subadmin account.

    Admin only. When no permissions are given the subadmin starts read-only.
    """
    result = await gateway.create(principal, data.model_dump(), context)
    return SubadminEnvelope(
        message="Subadmin created successfully",
        subadmin=PrincipalResponse.model_validate(result.resource),
    )


@router.get("/", response_model=SubadminListResponse)
async def list_subadmins(
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[SubadminGateway, Depends(get_subadmin_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    is_active: bool | None = None,
):
    result = await gateway.list(principal, page, limit, {"is_active": is_active}, context)
    return SubadminListResponse(
        subadmins=[PrincipalResponse.model_validate(user) for user in result.items],
        pagination=result.pagination.to_dict(),
    )


@router.get("/{subadmin_id}", response_model=SubadminEnvelope)
async def get_subadmin(
    subadmin_id: str,
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[SubadminGateway, Depends(get_subadmin_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    user = await gateway.get(principal, subadmin_id, context)
    return SubadminEnvelope(subadmin=PrincipalResponse.model_validate(user))


@router.put("/{subadmin_id}", response_model=SubadminEnvelope)
async def update_subadmin(
    subadmin_id: str,
    data: SubadminUpdate,
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[SubadminGateway, Depends(get_subadmin_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    """Update profile fields, password, status or permissions (merged into the current vector)"""
    result = await gateway.update(
        principal, subadmin_id, data.model_dump(exclude_unset=True), context
    )
    return SubadminEnvelope(
        message="Subadmin updated successfully",
        subadmin=PrincipalResponse.model_validate(result.resource),
    )


@router.delete("/{subadmin_id}", response_model=MessageResponse)
async def delete_subadmin(
    subadmin_id: str,
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[SubadminGateway, Depends(get_subadmin_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    """Deactivate a subadmin; the row is kept for the activity history"""
    await gateway.delete(principal, subadmin_id, context)
    return MessageResponse(message="Subadmin deactivated successfully")
