"""
Time entry mapper for converting between domain entities and database models.
"""

from timesheet_api.domain.models.time_entry import TimeEntry
from timesheet_api.infrastructure.db.models import TimeEntryModel


class TimeEntryMapper:
    """Maps between TimeEntry domain entity and TimeEntryModel database model."""

    # Columns copied onto an existing row on update
    MUTABLE_FIELDS = ("hours", "is_billable", "hourly_rate", "notes", "timesheet_id", "updated_at")

    def domain_to_model(self, time_entry: TimeEntry) -> TimeEntryModel:
        """Convert TimeEntry domain entity to TimeEntryModel."""
        return TimeEntryModel(
            id=time_entry.id,
            user_id=time_entry.user_id,
            project_id=time_entry.project_id,
            task_id=time_entry.task_id,
            timesheet_id=time_entry.timesheet_id,
            date=time_entry.date,
            hours=time_entry.hours,
            is_billable=time_entry.is_billable,
            hourly_rate=time_entry.hourly_rate,
            notes=time_entry.notes,
            created_at=time_entry.created_at,
            updated_at=time_entry.updated_at,
        )

    def update_model(self, model: TimeEntryModel, time_entry: TimeEntry) -> None:
        """Copy the mutable attributes of ``time_entry`` onto ``model``."""
        for attr in self.MUTABLE_FIELDS:
            setattr(model, attr, getattr(time_entry, attr))

    def model_to_domain(self, model: TimeEntryModel) -> TimeEntry:
        """
        Convert TimeEntryModel to TimeEntry domain entity.
        Display names are read from the eagerly loaded project, client and task.
        """
        project = model.project
        return TimeEntry(
            id=model.id,
            user_id=model.user_id,
            project_id=model.project_id,
            task_id=model.task_id,
            timesheet_id=model.timesheet_id,
            date=model.date,
            hours=model.hours,
            is_billable=model.is_billable if model.is_billable is not None else True,
            hourly_rate=model.hourly_rate,
            notes=model.notes,
            project_name=project.name if project else None,
            client_name=project.client.name if project and project.client else None,
            task_name=model.task.name if model.task else None,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
