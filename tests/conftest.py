"""Shared test fixtures for pytest"""
import os

# Settings are read at import time by the app module
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "listings-test-secret-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("REDIS_ENABLED", "false")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from listings.domain.entities.principal import PermissionVector  # noqa: E402
from listings.infrastructure.persistence.database import (  # noqa: E402
    Base,
    build_sessionmaker,
    get_db,
    get_db_transactional,
)
from listings.infrastructure.persistence.repositories import UserRepository  # noqa: E402
from listings.infrastructure.security.jwt import create_access_token  # noqa: E402
from listings.infrastructure.security.password import get_password_hash  # noqa: E402
from listings.main import app  # noqa: E402
from listings.presentation.api.dependencies import get_session_factory  # noqa: E402
from listings.shared.enums import Role  # noqa: E402

TEST_PASSWORD = "testpass123"


@pytest.fixture(scope="session")
def password_hash():
    """bcrypt is slow; hash the shared test password once"""
    return get_password_hash(TEST_PASSWORD)


@pytest.fixture
async def test_engine():
    """In-memory database shared by every session of one test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return build_sessionmaker(test_engine)


@pytest.fixture
async def test_db(session_factory):
    """Create test database session"""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """HTTP client for API testing"""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_db_transactional():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_db_transactional] = override_get_db_transactional
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db, username, role, password_hash, permissions=None, created_by=None):
    user = await UserRepository(db).create_user(
        username=username,
        email=f"{username}@example.com",
        hashed_password=password_hash,
        role=role,
        permissions=permissions,
        created_by=created_by,
    )
    await db.commit()
    return user


@pytest.fixture
async def admin_user(test_db, password_hash):
    """Admin with the full permission vector"""
    return await _create_user(test_db, "admin", Role.ADMIN, password_hash)


@pytest.fixture
async def subadmin_user(test_db, password_hash, admin_user):
    """Subadmin allowed to create, read, update and delete"""
    return await _create_user(
        test_db, "subadmin", Role.SUBADMIN, password_hash,
        permissions=PermissionVector.full(), created_by=admin_user.id,
    )


@pytest.fixture
async def other_subadmin(test_db, password_hash, admin_user):
    return await _create_user(
        test_db, "othersub", Role.SUBADMIN, password_hash,
        permissions=PermissionVector.full(), created_by=admin_user.id,
    )


@pytest.fixture
async def readonly_subadmin(test_db, password_hash, admin_user):
    return await _create_user(
        test_db, "readonlysub", Role.SUBADMIN, password_hash, created_by=admin_user.id
    )


@pytest.fixture
async def end_user(test_db, password_hash):
    return await _create_user(test_db, "enduser", Role.USER, password_hash)


def bearer(user) -> dict[str, str]:
    token = create_access_token(data={"sub": user.id, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user):
    return bearer(admin_user)


@pytest.fixture
def subadmin_headers(subadmin_user):
    return bearer(subadmin_user)


@pytest.fixture
def headers_for():
    """Build bearer headers for any user row"""
    return bearer
