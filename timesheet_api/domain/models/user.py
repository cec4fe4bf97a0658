"""
User domain model.
Represents an employee, the manager who approves their timesheets, or an administrator.
"""

from dataclasses import dataclass
from typing import Optional
from enum import Enum

from timesheet_api.domain.models.base import BaseEntity, ValidationError


class UserRole(str, Enum):
    """System-wide user roles."""
    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"
    SUPER_ADMIN = "SUPER_ADMIN"

    @property
    def is_elevated(self) -> bool:
        """Managers and administrators may act on other users' timesheets."""
        return self in (UserRole.MANAGER, UserRole.SUPER_ADMIN)


@dataclass(eq=False)
class User(BaseEntity):
    """
    User entity.
    ``id`` is the identity provider's subject (a UUID string).
    """

    email: str = ""
    first_name: str = ""
    last_name: str = ""
    role: UserRole = UserRole.EMPLOYEE
    manager_id: Optional[str] = None
    position: Optional[str] = None
    department_name: Optional[str] = None
    is_active: bool = True

    def validate(self) -> None:
        if not self.email or "@" not in self.email:
            raise ValidationError(f"Invalid email format: {self.email}", "email")
        if self.manager_id is not None and self.manager_id == self.id:
            raise ValidationError("A user cannot be their own manager", "manager_id")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def has_manager(self) -> bool:
        return self.manager_id is not None
