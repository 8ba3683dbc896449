from listings.application.services.activity_service import ActivityService
from listings.application.services.auth_service import AuthService, LoginResult
from listings.application.services.authorization_service import AuthorizationService
from listings.application.services.booking_service import BookingPage, BookingService
from listings.application.services.catalog_service import CatalogPage, CatalogService

__all__ = [
    "ActivityService",
    "AuthService",
    "AuthorizationService",
    "BookingPage",
    "BookingService",
    "CatalogPage",
    "CatalogService",
    "LoginResult",
]
