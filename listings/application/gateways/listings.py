"""Gateways for the three listing kinds: properties, messes and gaming zones."""

from typing import Any

from listings.application.gateways.base import ResourceGateway
from listings.shared.enums import ResourceKind


class PropertyGateway(ResourceGateway[Any]):
    """PG/hostel properties"""

    resource_kind = ResourceKind.PROPERTY
    label = "property"

    def _describe(self, resource: Any) -> str:
        return resource.title


class MessGateway(ResourceGateway[Any]):
    resource_kind = ResourceKind.MESS
    label = "mess"

    def _describe(self, resource: Any) -> str:
        return resource.name


class GamingZoneGateway(ResourceGateway[Any]):
    resource_kind = ResourceKind.GAMING_ZONE
    label = "gaming zone"

    def _describe(self, resource: Any) -> str:
        return resource.name
