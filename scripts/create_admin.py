"""Create the database tables and a first admin account"""
import asyncio
import sys

from sqlalchemy import select

from listings.infrastructure.persistence.database import Base, get_engine, get_sessionmaker
from listings.infrastructure.persistence.models import User
from listings.infrastructure.persistence.repositories import UserRepository
from listings.infrastructure.security.password import get_password_hash
from listings.shared.enums import Role


async def create_admin(username: str, email: str, password: str):
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with get_sessionmaker()() as db:
        result = await db.execute(select(User).where(User.role == Role.ADMIN.value))
        if result.scalars().first() is not None:
            print("Admin user already exists")
        else:
            await UserRepository(db).create_user(
                username=username,
                email=email,
                hashed_password=get_password_hash(password),
                role=Role.ADMIN,
            )
            await db.commit()
            print("✅ Admin user created successfully!")
            print(f"  Email: {email}")

    await get_engine().dispose()


if __name__ == "__main__":
    if len(sys.argv) != 4:
        print("Usage: python -m scripts.create_admin <username> <email> <password>")
        print("Example: python -m scripts.create_admin admin admin@example.com changeme123")
        sys.exit(1)

    asyncio.run(create_admin(*sys.argv[1:]))
