from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from listings.application.services import AuthService
from listings.domain.entities.activity import RequestContext
from listings.domain.entities.principal import Principal
from listings.domain.exceptions import ResourceNotFoundException
from listings.infrastructure.persistence.database import get_db
from listings.infrastructure.persistence.repositories import UserRepository
from listings.presentation.api.dependencies import (get_auth_service,
                                                    get_current_principal,
                                                    get_request_context)
from listings.presentation.api.v1.schemas.auth import (LoginRequest, SignupRequest,
                                                       TokenResponse)
from listings.presentation.api.v1.schemas.principal import PrincipalResponse
from listings.presentation.rate_limit import limiter, login_limit

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
@limiter.limit(login_limit)
async def login(
    request: Request,  # Required by slowapi for rate limiting (extracts remote address)
    credentials: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    """
    Exchange email and password for a bearer token.

    Every attempt, successful or not, is written to the activity log.
    """
    result = await auth_service.login(credentials.email, credentials.password, context)
    return TokenResponse(
        access_token=result.access_token,
        token_type=result.token_type,
        user=PrincipalResponse.model_validate(result.account),
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    principal: Annotated[Principal, Depends(get_current_principal)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    """Record the logout; tokens are stateless so nothing is revoked"""
    await auth_service.logout(principal, context)


@router.post("/signup", response_model=PrincipalResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    data: SignupRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    context: Annotated[RequestContext, Depends(get_request_context)],
):
    """Register an end-user account (role=user)"""
    user = await auth_service.signup(
        username=data.username,
        email=data.email,
        password=data.password,
        name=data.name,
        context=context,
    )
    return PrincipalResponse.model_validate(user)


@router.get("/me", response_model=PrincipalResponse)
async def get_current_user_info(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get current authenticated principal"""
    user = await UserRepository(db).get_by_id(principal.id)
    if not user:
        raise ResourceNotFoundException("user", principal.id)
    return PrincipalResponse.model_validate(user)
