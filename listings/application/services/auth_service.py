"""
Authentication use cases: login, logout and end-user signup.

Each outcome, including failed logins, lands in the activity log.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from listings.domain.entities.activity import RequestContext
from listings.domain.entities.principal import Principal
from listings.domain.exceptions import AuthenticationException, UnauthorizedError
from listings.infrastructure.security.jwt import create_access_token
from listings.infrastructure.security.password import (DUMMY_HASH,
                                                       get_password_hash,
                                                       verify_password)
from listings.shared.enums import ActivityAction, ActivityStatus, ResourceKind, Role
from listings.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from listings.application.services.activity_service import ActivityService
    from listings.infrastructure.persistence.models.user import User
    from listings.infrastructure.persistence.repositories.user_repo import UserRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoginResult:
    access_token: str
    principal: Principal
    account: "User"
    token_type: str = "bearer"


class AuthService:
    def __init__(self, user_repo: "UserRepository", activity: "ActivityService"):
        self.user_repo = user_repo
        self.activity = activity

    async def login(
        self, email: str, password: str, context: RequestContext | None = None
    ) -> LoginResult:
        """Check credentials and issue an access token."""
        user = await self.user_repo.get_by_email(email)

        if user is None:
            # Same bcrypt cost as a real check
            await asyncio.to_thread(verify_password, password, DUMMY_HASH)
            await self.activity.record(
                None,
                ActivityAction.LOGIN,
                ResourceKind.USER,
                detail=f"Failed login attempt for {email}",
                context=context,
                status=ActivityStatus.FAILED,
            )
            raise AuthenticationException("Invalid credentials")

        if not await asyncio.to_thread(verify_password, password, user.hashed_password):
            await self.activity.record(
                user.id,
                ActivityAction.LOGIN,
                ResourceKind.USER,
                user.id,
                "Invalid password",
                context,
                ActivityStatus.FAILED,
            )
            raise AuthenticationException("Invalid credentials")

        if not user.is_active:
            await self.activity.record(
                user.id,
                ActivityAction.LOGIN,
                ResourceKind.USER,
                user.id,
                "Login attempt on inactive account",
                context,
                ActivityStatus.FAILED,
            )
            raise UnauthorizedError("Account is deactivated")

        await self.user_repo.record_login(user)
        principal = user.to_principal()
        token = create_access_token({"sub": principal.id, "role": principal.role.value})
        await self.activity.record(
            principal.id, ActivityAction.LOGIN, ResourceKind.USER, principal.id,
            "Successful login", context,
        )
        logger.info("Principal %s logged in", principal.id)
        return LoginResult(access_token=token, principal=principal, account=user)

    async def logout(self, principal: Principal, context: RequestContext | None = None) -> None:
        await self.activity.record(
            principal.id, ActivityAction.LOGOUT, ResourceKind.USER, principal.id,
            "User logged out", context,
        )

    async def signup(
        self,
        username: str,
        email: str,
        password: str,
        name: str | None = None,
        context: RequestContext | None = None,
    ) -> "User":
        """Self-service registration; always creates a role=user account."""
        hashed = await asyncio.to_thread(get_password_hash, password)
        user = await self.user_repo.create_user(
            username=username,
            email=email,
            hashed_password=hashed,
            role=Role.USER,
            name=name,
        )
        await self.activity.record(
            user.id, ActivityAction.SIGNUP, ResourceKind.USER, user.id,
            f"New user signed up: {user.username}", context,
        )
        return user
