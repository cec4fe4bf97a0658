"""
Project and Task domain models.
Only the attributes time tracking needs are modelled here; project
administration lives outside this service.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from timesheet_api.domain.models.base import BaseEntity


@dataclass(eq=False)
class Project(BaseEntity):
    """Project that time is logged against, with its client's display name."""

    name: str = ""
    code: Optional[str] = None
    client_id: Optional[int] = None
    client_name: Optional[str] = None
    is_active: bool = True


@dataclass(eq=False)
class Task(BaseEntity):
    """Task inside a project. Supplies billing defaults for new time entries."""

    project_id: int = 0
    name: str = ""
    is_billable: bool = True
    hourly_rate: Optional[Decimal] = None

    def belongs_to(self, project_id: int) -> bool:
        return self.project_id == project_id
