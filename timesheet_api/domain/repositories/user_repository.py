"""
User repository interface.
Defines the contract for user lookups; user administration lives elsewhere.
"""

from abc import ABC, abstractmethod
from typing import Optional, List

from timesheet_api.domain.models.user import User


class UserRepository(ABC):
    """Read-side repository for users and their reporting line."""

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        """Find a user by ID. Returns None if not found."""
        pass

    @abstractmethod
    async def find_by_ids(self, user_ids: List[str]) -> List[User]:
        """Find all users whose ID is in ``user_ids``."""
        pass

    @abstractmethod
    async def find_manager_id(self, user_id: str) -> Optional[str]:
        """Resolve the manager of ``user_id``; None when there is none."""
        pass
