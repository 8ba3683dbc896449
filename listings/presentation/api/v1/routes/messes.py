from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from listings.application.gateways import MessGateway
from listings.application.services import CatalogService
from listings.domain.entities.activity import RequestContext
from listings.domain.entities.principal import Principal
from listings.presentation.api.dependencies import (get_current_principal,
                                                    get_mess_catalog,
                                                    get_mess_gateway,
                                                    get_request_context)
from listings.presentation.api.v1.schemas.listing import (MessageResponse,
                                                          MessCreate,
                                                          MessEnvelope,
                                                          MessListResponse,
                                                          MessResponse,
                                                          MessUpdate)

router = APIRouter()


@router.post("/", response_model=MessEnvelope, status_code=status.HTTP_201_CREATED)
async def create_mess(
    data: MessCreate,
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[MessGateway, Depends(get_mess_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    """Create a mess owned by the caller (requires can_create)"""
    result = await gateway.create(principal, data.model_dump(), context)
    return MessEnvelope(
        message="Mess created successfully",
        mess=MessResponse.model_validate(result.resource),
    )


@router.get("/", response_model=MessListResponse)
async def list_messes(
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[MessGateway, Depends(get_mess_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    search: str | None = None,
    is_active: bool | None = None,
    created_by: str | None = None,
):
    result = await gateway.list(
        principal,
        page,
        limit,
        {"search": search, "is_active": is_active, "created_by": created_by},
        context,
    )
    return MessListResponse(
        messes=[MessResponse.model_validate(item) for item in result.items],
        pagination=result.pagination.to_dict(),
    )


@router.get("/public", response_model=MessListResponse)
async def browse_messes(
    catalog: Annotated[CatalogService, Depends(get_mess_catalog)],
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    search: str | None = None,
):
    """Active messes, no token required"""
    result = await catalog.browse(page, limit, search)
    return MessListResponse(
        messes=[MessResponse.model_validate(item) for item in result.items],
        pagination=result.pagination.to_dict(),
    )


@router.get("/public/{mess_id}", response_model=MessEnvelope)
async def view_mess(
    mess_id: str,
    catalog: Annotated[CatalogService, Depends(get_mess_catalog)],
):
    mess = await catalog.view(mess_id)
    return MessEnvelope(mess=MessResponse.model_validate(mess))


@router.get("/{mess_id}", response_model=MessEnvelope)
async def get_mess(
    mess_id: str,
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[MessGateway, Depends(get_mess_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    mess = await gateway.get(principal, mess_id, context)
    return MessEnvelope(mess=MessResponse.model_validate(mess))


@router.put("/{mess_id}", response_model=MessEnvelope)
async def update_mess(
    mess_id: str,
    data: MessUpdate,
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[MessGateway, Depends(get_mess_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    """
    Update a mess.

    Admins need can_update; subadmins additionally need to own the mess.
    """
    result = await gateway.update(
        principal, mess_id, data.model_dump(exclude_unset=True, exclude_none=True), context
    )
    return MessEnvelope(
        message="Mess updated successfully",
        mess=MessResponse.model_validate(result.resource),
    )


@router.delete("/{mess_id}", response_model=MessageResponse)
async def delete_mess(
    mess_id: str,
    principal: Annotated[Principal, Depends(get_current_principal)],
    gateway: Annotated[MessGateway, Depends(get_mess_gateway)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    await gateway.delete(principal, mess_id, context)
    return MessageResponse(message="Mess deleted successfully")
