"""Reset the password of an existing account"""
import asyncio
import sys

from listings.infrastructure.persistence.database import get_engine, get_sessionmaker
from listings.infrastructure.persistence.repositories import UserRepository
from listings.infrastructure.security.password import get_password_hash


async def reset_password(email: str, new_password: str):
    async with get_sessionmaker()() as db:
        user = await UserRepository(db).get_by_email(email)
        if not user:
            print(f"❌ User '{email}' not found")
            return

        user.hashed_password = get_password_hash(new_password)
        user.version += 1
        await db.commit()

        print("✅ Password reset successful!")
        print(f"  Email: {user.email}")

    await get_engine().dispose()


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python -m scripts.reset_password <email> <new_password>")
        sys.exit(1)

    asyncio.run(reset_password(*sys.argv[1:]))
