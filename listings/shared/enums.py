"""
Shared enumerations for the listings platform.

String-valued so they serialize directly into JSON responses and database
columns.
"""

from enum import Enum


class Role(str, Enum):
    """Principal role enumeration"""

    ADMIN = "admin"
    SUBADMIN = "subadmin"
    USER = "user"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [role.value for role in cls]


class Action(str, Enum):
    """Gated operations on a resource"""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"

    @property
    def permission_flag(self) -> str:
        """Name of the permission vector field guarding this action"""
        return f"can_{self.value}"

    @property
    def activity_action(self) -> "ActivityAction":
        return ActivityAction(self.value.upper())

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [action.value for action in cls]


class ActivityAction(str, Enum):
    """Action kinds recorded in the activity log"""

    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    SIGNUP = "SIGNUP"
    BOOKING = "BOOKING"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [action.value for action in cls]


class ResourceKind(str, Enum):
    """Resource tags used by gateways and activity records"""

    USER = "USER"
    SUBADMIN = "SUBADMIN"
    PROPERTY = "PROPERTY"
    MESS = "MESS"
    GAMING_ZONE = "GAMING_ZONE"
    BOOKING = "BOOKING"
    ACTIVITY = "ACTIVITY"
    USER_ACTIVITY = "USER_ACTIVITY"
    UNAUTHORIZED_ACCESS = "UNAUTHORIZED_ACCESS"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [kind.value for kind in cls]


class ActivityStatus(str, Enum):
    """Outcome of an audited action"""

    SUCCESS = "SUCCESS"
    FAILED = "FAILED"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [status.value for status in cls]


class BookingStatus(str, Enum):
    """Lifecycle of a booking request"""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Listing kinds a booking may target
BOOKABLE_KINDS = frozenset({ResourceKind.PROPERTY, ResourceKind.MESS, ResourceKind.GAMING_ZONE})


class GatewayState(str, Enum):
    """States a gateway call moves through"""

    RECEIVED = "received"
    AUTHORIZING = "authorizing"
    AUTHORIZED = "authorized"
    DENIED = "denied"
    MUTATING = "mutating"
    MUTATED = "mutated"
    AUDITED_SUCCESS = "audited_success"
    AUDITED_FAILURE = "audited_failure"

    @property
    def is_terminal(self) -> bool:
        return self in (GatewayState.AUDITED_SUCCESS, GatewayState.AUDITED_FAILURE)
