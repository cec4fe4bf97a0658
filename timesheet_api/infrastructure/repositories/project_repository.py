"""
Project repository implementation using SQLAlchemy.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from timesheet_api.domain.models.project import Project, Task
from timesheet_api.domain.repositories.project_repository import ProjectRepository as ProjectRepositoryInterface
from timesheet_api.infrastructure.db.models import ProjectModel, TaskModel
from timesheet_api.infrastructure.mappers.project_mapper import ProjectMapper, TaskMapper


class SQLAlchemyProjectRepository(ProjectRepositoryInterface):
    """SQLAlchemy implementation of project repository."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.mapper = ProjectMapper()
        self.task_mapper = TaskMapper()

    async def find_by_id(self, project_id: int) -> Optional[Project]:
        model = await self.session.scalar(
            select(ProjectModel)
            .options(joinedload(ProjectModel.client))
            .where(ProjectModel.id == project_id)
        )
        return self.mapper.model_to_domain(model) if model else None

    async def find_task(self, task_id: int) -> Optional[Task]:
        model = await self.session.get(TaskModel, task_id)
        return self.task_mapper.model_to_domain(model) if model else None
