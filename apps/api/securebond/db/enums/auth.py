"""Auth-related enums."""

from enum import Enum


class Role(str, Enum):
    """
    Session roles.

    - ADMIN: Agency staff (clients, bonds, payments, court dates, settings)
    - MAINTENANCE: Operations staff (health, performance, audit logs)
    - CLIENT: Bonded client using the self-service portal
    """
    ADMIN = "admin"
    MAINTENANCE = "maintenance"
    CLIENT = "client"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


# Roles a staff User row may hold (clients live in their own table)
STAFF_ROLES = {Role.ADMIN, Role.MAINTENANCE}


class PrincipalType(str, Enum):
    """Who a session, notification, or audit entry belongs to."""
    USER = "user"
    CLIENT = "client"
    SYSTEM = "system"
