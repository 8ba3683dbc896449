from __future__ import annotations

from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listings.domain.entities.principal import PermissionVector, Principal
from listings.domain.exceptions import PersistenceError, ValidationException
from listings.infrastructure.persistence.models.user import User
from listings.infrastructure.persistence.repositories.base import BaseRepository
from listings.shared.enums import Role
from listings.shared.utils import utc_now


class UserRepository(BaseRepository[User]):
    """Identity store: user rows and the principals derived from them."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    async def get_principal(self, principal_id: str) -> Principal | None:
        user = await self.get_by_id(principal_id)
        return user.to_principal() if user else None

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email.strip().lower()))
        return result.scalar_one_or_none()

    async def exists_with(self, username: str, email: str) -> bool:
        result = await self.db.execute(
            select(User.id).where(
                or_(User.email == email.strip().lower(), User.username == username.strip())
            )
        )
        return result.first() is not None

    async def create_user(
        self,
        username: str,
        email: str,
        hashed_password: str,
        role: Role,
        *,
        permissions: PermissionVector | None = None,
        created_by: str | None = None,
        name: str | None = None,
    ) -> User:
        """Insert a user; the role default vector applies when none is given"""
        if await self.exists_with(username, email):
            raise ValidationException("User with this email or username already exists")

        vector = permissions or PermissionVector.default_for(role)
        user = User(
            username=username.strip(),
            email=email.strip().lower(),
            hashed_password=hashed_password,
            role=role.value,
            name=name,
            is_active=True,
            created_by=created_by,
            permissions=vector.to_dict(),
        )
        try:
            return await self.add(user)
        except PersistenceError as e:
            if isinstance(e.__cause__, IntegrityError):
                raise ValidationException(
                    "User with this email or username already exists"
                ) from e
            raise

    async def record_login(self, user: User) -> None:
        user.last_login = utc_now()
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to record login: {e}") from e


class SubadminStore(UserRepository):
    """
    Resource store for the subadmin gateway.

    Scoped to role=subadmin rows. ``delete`` deactivates instead of removing
    the row so activity records keep resolving their actor.
    """

    async def get(self, resource_id: str) -> User | None:
        user = await self.get_by_id(resource_id)
        if user is None or user.role != Role.SUBADMIN.value:
            return None
        return user

    async def list(
        self, skip: int = 0, limit: int = 100, filters: dict[str, Any] | None = None
    ) -> tuple[list[User], int]:
        conditions: list[Any] = [User.role == Role.SUBADMIN.value]
        filters = filters or {}
        if "is_active" in filters:
            conditions.append(User.is_active.is_(bool(filters["is_active"])))
        if "created_by" in filters:
            conditions.append(User.created_by == filters["created_by"])

        try:
            total = await self.count_where(*conditions)
            result = await self.db.execute(
                select(User)
                .where(*conditions)
                .order_by(User.created_at.desc(), User.id.desc())
                .offset(skip)
                .limit(limit)
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list subadmins: {e}") from e
        return list(result.scalars().all()), total

    async def create(self, payload: dict[str, Any], created_by: str) -> User:
        return await self.create_user(
            username=payload["username"],
            email=payload["email"],
            hashed_password=payload["hashed_password"],
            role=Role.SUBADMIN,
            permissions=PermissionVector.from_dict(payload.get("permissions")),
            created_by=created_by,
            name=payload.get("name"),
        )

    async def update(
        self, resource_id: str, changes: dict[str, Any], expected_version: int
    ) -> User | None:
        if "email" in changes:
            changes = {**changes, "email": changes["email"].strip().lower()}
        try:
            return await self.update_versioned(resource_id, changes, expected_version)
        except PersistenceError as e:
            if isinstance(e.__cause__, IntegrityError):
                raise ValidationException("Username or email already in use") from e
            raise

    async def delete(self, resource_id: str, expected_version: int) -> bool:
        updated = await self.update_versioned(
            resource_id, {"is_active": False}, expected_version
        )
        return updated is not None
