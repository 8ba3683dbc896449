from datetime import datetime

from pydantic import BaseModel, ConfigDict


class PaginationResponse(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    model_config = ConfigDict(from_attributes=True)


class ActivityResponse(BaseModel):
    id: str
    actor_id: str | None
    action: str
    resource_kind: str
    resource_id: str | None = None
    status: str
    detail: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime


class ActivityListResponse(BaseModel):
    activities: list[ActivityResponse]
    pagination: PaginationResponse
