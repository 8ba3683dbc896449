from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from listings.application.gateways import (GamingZoneGateway, MessGateway,
                                           PropertyGateway, SubadminGateway)
from listings.application.services import (ActivityService, AuthorizationService,
                                           AuthService, BookingService,
                                           CatalogService)
from listings.domain.entities.activity import RequestContext
from listings.domain.entities.principal import Principal
from listings.domain.exceptions import UnauthorizedError
from listings.infrastructure.cache import CacheService, PrincipalCache
from listings.infrastructure.config.settings import Settings, get_settings
from listings.infrastructure.persistence.database import (get_db,
                                                          get_db_transactional,
                                                          get_sessionmaker)
from listings.infrastructure.persistence.repositories import (
    ActivityRepository,
    BookingRepository,
    GamingZoneRepository,
    MessRepository,
    PropertyRepository,
    SubadminStore,
    UserRepository,
)
from listings.infrastructure.security.jwt import verify_token
from listings.presentation.api.v1.schemas.auth import TokenPayload
from listings.shared.enums import ResourceKind, Role

# Missing credentials are reported as 401 by get_current_principal
security = HTTPBearer(auto_error=False)

# Global service instances (singletons)
_cache_service: CacheService | None = None


async def get_cache_service() -> CacheService:
    """
    Cache service dependency (singleton)

    Returns global cache service instance.
    Connected on app startup in main.py when Redis is enabled.
    """
    global _cache_service
    if _cache_service is None:
        _cache_service = CacheService()
    return _cache_service


def set_cache_service(cache_service: CacheService | None):
    """Set global cache service (called on app startup)"""
    global _cache_service
    _cache_service = cache_service


async def get_principal_cache(
    cache: CacheService = Depends(get_cache_service),
) -> PrincipalCache:
    return PrincipalCache(cache)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory for writes that must commit independently of the request"""
    return get_sessionmaker()


def get_request_context(request: Request) -> RequestContext:
    """Client details attached to every activity record"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        ip_address = forwarded.split(",")[0].strip()
    else:
        ip_address = request.client.host if request.client else None
    return RequestContext(
        ip_address=ip_address,
        user_agent=request.headers.get("User-Agent"),
        path=request.url.path,
    )


async def get_activity_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    settings: Settings = Depends(get_settings),
) -> ActivityService:
    return ActivityService(
        ActivityRepository(session_factory),
        write_timeout=settings.audit_write_timeout_seconds,
        read_timeout=settings.gateway_timeout_seconds,
        max_page_size=settings.max_page_size,
    )


async def get_authorization_service(
    activity: ActivityService = Depends(get_activity_service),
) -> AuthorizationService:
    return AuthorizationService(activity)


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
    principal_cache: PrincipalCache = Depends(get_principal_cache),
) -> Principal:
    """
    Validate the bearer token and resolve the principal it names.

    Missing or invalid tokens, unknown principals and deactivated principals
    are all rejected with 401.
    """
    if credentials is None:
        raise UnauthorizedError("Not authorized, no token")

    try:
        token_data = TokenPayload(**verify_token(credentials.credentials))
    except (ValueError, ValidationError) as e:
        raise UnauthorizedError("Not authorized, token failed") from e

    principal = await principal_cache.lookup(
        token_data.sub, UserRepository(db).get_principal
    )
    if principal is None or not principal.is_active:
        raise UnauthorizedError("Invalid or inactive user")
    return principal


async def require_admin(
    principal: Principal = Depends(get_current_principal),
    authz: AuthorizationService = Depends(get_authorization_service),
    context: RequestContext = Depends(get_request_context),
) -> Principal:
    """Role gate for admin-only routes; failures are logged as unauthorized access"""
    await authz.require_role(principal, Role.ADMIN, context=context)
    return principal


async def get_auth_service(
    db: AsyncSession = Depends(get_db_transactional),
    activity: ActivityService = Depends(get_activity_service),
) -> AuthService:
    return AuthService(UserRepository(db), activity)


async def get_property_gateway(
    db: AsyncSession = Depends(get_db_transactional),
    authz: AuthorizationService = Depends(get_authorization_service),
    activity: ActivityService = Depends(get_activity_service),
    settings: Settings = Depends(get_settings),
) -> PropertyGateway:
    return PropertyGateway(
        PropertyRepository(db), authz, activity,
        timeout=settings.gateway_timeout_seconds,
    )


async def get_mess_gateway(
    db: AsyncSession = Depends(get_db_transactional),
    authz: AuthorizationService = Depends(get_authorization_service),
    activity: ActivityService = Depends(get_activity_service),
    settings: Settings = Depends(get_settings),
) -> MessGateway:
    return MessGateway(
        MessRepository(db), authz, activity,
        timeout=settings.gateway_timeout_seconds,
    )


async def get_gaming_zone_gateway(
    db: AsyncSession = Depends(get_db_transactional),
    authz: AuthorizationService = Depends(get_authorization_service),
    activity: ActivityService = Depends(get_activity_service),
    settings: Settings = Depends(get_settings),
) -> GamingZoneGateway:
    return GamingZoneGateway(
        GamingZoneRepository(db), authz, activity,
        timeout=settings.gateway_timeout_seconds,
    )


async def get_subadmin_gateway(
    db: AsyncSession = Depends(get_db_transactional),
    authz: AuthorizationService = Depends(get_authorization_service),
    activity: ActivityService = Depends(get_activity_service),
    principal_cache: PrincipalCache = Depends(get_principal_cache),
    settings: Settings = Depends(get_settings),
) -> SubadminGateway:
    return SubadminGateway(
        SubadminStore(db), authz, activity,
        timeout=settings.gateway_timeout_seconds,
        principal_cache=principal_cache,
    )


async def get_property_catalog(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> CatalogService:
    return CatalogService(
        PropertyRepository(db), ResourceKind.PROPERTY,
        timeout=settings.gateway_timeout_seconds,
    )


async def get_mess_catalog(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> CatalogService:
    return CatalogService(
        MessRepository(db), ResourceKind.MESS,
        timeout=settings.gateway_timeout_seconds,
    )


async def get_gaming_zone_catalog(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> CatalogService:
    return CatalogService(
        GamingZoneRepository(db), ResourceKind.GAMING_ZONE,
        timeout=settings.gateway_timeout_seconds,
    )


async def get_booking_service(
    db: AsyncSession = Depends(get_db_transactional),
    activity: ActivityService = Depends(get_activity_service),
    settings: Settings = Depends(get_settings),
) -> BookingService:
    listings = {
        ResourceKind.PROPERTY: PropertyRepository(db),
        ResourceKind.MESS: MessRepository(db),
        ResourceKind.GAMING_ZONE: GamingZoneRepository(db),
    }
    return BookingService(
        BookingRepository(db), listings, activity,
        timeout=settings.gateway_timeout_seconds,
    )
