""" Repository module for the persistence layer. """

from listings.infrastructure.persistence.repositories.activity_repo import ActivityRepository
from listings.infrastructure.persistence.repositories.base import BaseRepository
from listings.infrastructure.persistence.repositories.booking_repo import BookingRepository
from listings.infrastructure.persistence.repositories.listing_repo import (
    GamingZoneRepository,
    ListingRepository,
    MessRepository,
    PropertyRepository,
)
from listings.infrastructure.persistence.repositories.user_repo import (
    SubadminStore,
    UserRepository,
)

__all__ = [
    "ActivityRepository",
    "BaseRepository",
    "BookingRepository",
    "GamingZoneRepository",
    "ListingRepository",
    "MessRepository",
    "PropertyRepository",
    "SubadminStore",
    "UserRepository",
]
