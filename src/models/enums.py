"""Enums for model fields."""

from enum import Enum


class UserRole(str, Enum):
    """Roles a user account can hold."""

    USER = "user"
    ADMIN = "admin"

    def can_mutate_any_card(self) -> bool:
        """Check if this role bypasses card ownership."""
        return self == UserRole.ADMIN
