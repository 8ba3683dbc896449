from listings.infrastructure.persistence.models.activity import Activity
from listings.infrastructure.persistence.models.booking import Booking
from listings.infrastructure.persistence.models.listing import GamingZone, Mess, Property
# Mixins for model composition
from listings.infrastructure.persistence.models.mixins import (CuidMixin,
                                                               ListingModel,
                                                               OwnedMixin,
                                                               TimestampMixin,
                                                               VersionedMixin)
from listings.infrastructure.persistence.models.user import User

__all__ = [
    # Models
    "User",
    "Property",
    "Mess",
    "GamingZone",
    "Activity",
    "Booking",
    # Mixins
    "CuidMixin",
    "TimestampMixin",
    "VersionedMixin",
    "OwnedMixin",
    "ListingModel",
]
