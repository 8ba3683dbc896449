from listings.application.gateways.base import (
    GatewayCall,
    GatewayPage,
    GatewayResult,
    ResourceGateway,
)
from listings.application.gateways.listings import (
    GamingZoneGateway,
    MessGateway,
    PropertyGateway,
)
from listings.application.gateways.subadmin import SubadminGateway

__all__ = [
    "GamingZoneGateway",
    "GatewayCall",
    "GatewayPage",
    "GatewayResult",
    "MessGateway",
    "PropertyGateway",
    "ResourceGateway",
    "SubadminGateway",
]
