"""User roles checked by the guard chain.

Role Hierarchy:
    super_admin > admin > user

Usage:
    from src.domain.enums import UserRole

    if user.role in {UserRole.ADMIN, UserRole.SUPER_ADMIN}:
        ...
"""

from enum import Enum


class UserRole(str, Enum):
    """Roles carried in the ``role`` claim of access tokens.

    String Enum:
        Inherits from str so values serialize directly into JWT claims
        and database columns.
    """

    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    @classmethod
    def values(cls) -> list[str]:
        """All role values as strings."""
        return [role.value for role in cls]
