"""
Project and task mappers for converting database models to domain entities.
"""

from timesheet_api.domain.models.project import Project, Task
from timesheet_api.infrastructure.db.models import ProjectModel, TaskModel


class ProjectMapper:
    """Maps ProjectModel (with its client loaded) to the Project entity."""

    def model_to_domain(self, model: ProjectModel) -> Project:
        return Project(
            id=model.id,
            name=model.name,
            code=model.code,
            client_id=model.client_id,
            client_name=model.client.name if model.client else None,
            is_active=model.is_active if model.is_active is not None else True,
            created_at=model.created_at,
        )


class TaskMapper:
    """Maps TaskModel to the Task entity."""

    def model_to_domain(self, model: TaskModel) -> Task:
        return Task(
            id=model.id,
            project_id=model.project_id,
            name=model.name,
            is_billable=model.is_billable if model.is_billable is not None else True,
            hourly_rate=model.hourly_rate,
            created_at=model.created_at,
        )
