from typing import Annotated

from fastapi import APIRouter, Depends, Query

from listings.application.services import ActivityService, AuthorizationService
from listings.domain.entities.activity import ActivityFilter, ActivityPage, RequestContext
from listings.domain.entities.principal import Principal
from listings.domain.exceptions import ValidationException
from listings.infrastructure.config.settings import get_settings
from listings.presentation.api.dependencies import (get_activity_service,
                                                    get_authorization_service,
                                                    get_request_context,
                                                    require_admin)
from listings.presentation.api.v1.schemas.activity import ActivityListResponse
from listings.shared.enums import Action, ActivityAction, ResourceKind
from listings.shared.utils import parse_iso_datetime

router = APIRouter()

settings = get_settings()


def _parse_date(value: str | None, field: str):
    try:
        return parse_iso_datetime(value)
    except ValueError as e:
        raise ValidationException(f"{field} must be an ISO-8601 date", field=field) from e


def _parse_action(value: str | None) -> ActivityAction | None:
    if not value:
        return None
    try:
        return ActivityAction(value.upper())
    except ValueError as e:
        raise ValidationException(
            f"action must be one of {', '.join(ActivityAction.values())}", field="action"
        ) from e


def _to_response(result: ActivityPage) -> ActivityListResponse:
    return ActivityListResponse(
        activities=[record.to_dict() for record in result.records],
        pagination=result.pagination.to_dict(),
    )


@router.get("/", response_model=ActivityListResponse)
async def list_activities(
    principal: Annotated[Principal, Depends(require_admin)],
    activity: Annotated[ActivityService, Depends(get_activity_service)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    context: Annotated[RequestContext, Depends(get_request_context)],
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    action: str | None = None,
    resource: str | None = None,
    user_id: str | None = Query(None, alias="userId"),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
):
    """
    Query the activity log (admin only).

    Filters are ANDed; empty values are ignored. Dates are ISO-8601 and the
    bounds are inclusive. Results are most recent first.
    """
    authz.require(principal, Action.READ, ResourceKind.ACTIVITY)
    filters = ActivityFilter(
        action=_parse_action(action),
        resource_kind=resource.upper() if resource else None,
        actor_id=user_id,
        start_time=_parse_date(start_date, "startDate"),
        end_time=_parse_date(end_date, "endDate"),
    )
    result = await activity.list(filters, page, limit)

    await activity.record(
        principal.id,
        ActivityAction.READ,
        ResourceKind.ACTIVITY,
        detail=f"Retrieved activities list (page {page})",
        context=context,
    )
    return _to_response(result)


@router.get("/user/{user_id}", response_model=ActivityListResponse)
async def list_user_activities(
    user_id: str,
    principal: Annotated[Principal, Depends(require_admin)],
    activity: Annotated[ActivityService, Depends(get_activity_service)],
    authz: Annotated[AuthorizationService, Depends(get_authorization_service)],
    context: Annotated[RequestContext, Depends(get_request_context)],
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    """Activity history of one principal (admin only)"""
    authz.require(principal, Action.READ, ResourceKind.USER_ACTIVITY)
    result = await activity.list_for_actor(user_id, page, limit)

    await activity.record(
        principal.id,
        ActivityAction.READ,
        ResourceKind.USER_ACTIVITY,
        user_id,
        f"Retrieved user activities for user {user_id}",
        context,
    )
    return _to_response(result)
