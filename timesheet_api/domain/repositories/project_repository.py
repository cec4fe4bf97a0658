"""
Project repository interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from timesheet_api.domain.models.project import Project, Task


class ProjectRepository(ABC):
    """Read-side repository for projects and their tasks."""

    @abstractmethod
    async def find_by_id(self, project_id: int) -> Optional[Project]:
        pass

    @abstractmethod
    async def find_task(self, task_id: int) -> Optional[Task]:
        """Find a task by ID. Returns None if not found."""
        pass
