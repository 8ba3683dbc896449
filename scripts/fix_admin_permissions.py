"""Restore the full permission vector on every admin account"""
import asyncio

from sqlalchemy import select

from listings.domain.entities.principal import PermissionVector
from listings.infrastructure.persistence.database import get_engine, get_sessionmaker
from listings.infrastructure.persistence.models import User
from listings.shared.enums import Role


async def fix_admin_permissions():
    async with get_sessionmaker()() as db:
        result = await db.execute(select(User).where(User.role == Role.ADMIN.value))
        admins = result.scalars().all()
        if not admins:
            print("No admin users found")
            return

        for admin in admins:
            admin.permissions = PermissionVector.full().to_dict()
            admin.version += 1
            print(f"Updated permissions for admin: {admin.username}")
        await db.commit()

    print("Admin permissions fixed successfully")
    await get_engine().dispose()


if __name__ == "__main__":
    asyncio.run(fix_admin_permissions())
