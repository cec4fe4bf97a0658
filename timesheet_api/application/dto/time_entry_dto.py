"""
Time Entry DTOs for the application layer.
Data Transfer Objects for time entry and time summary operations.
"""

import datetime as dt
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import Field, field_validator

from timesheet_api.domain.models.time_entry import TimeEntry, MAX_NOTES_LENGTH
from timesheet_api.domain.services.time_aggregator import ProjectHours, TimeSummary
from .base_dto import BaseDTO, RequestDTO, ResponseDTO, Hours


# Request DTOs
class CreateTimeEntryRequestDTO(RequestDTO):
    """DTO for time entry creation. Billable flag and rate default from the task."""

    project_id: int = Field(description="Project ID")
    task_id: int = Field(description="Task ID, must belong to the project")
    date: dt.date = Field(description="Day the work was done")
    hours: Decimal = Field(gt=0, le=24, decimal_places=2, description="Hours worked")
    is_billable: Optional[bool] = Field(default=None, description="Override the task's billable flag")
    hourly_rate: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2, description="Override the task's hourly rate")
    notes: Optional[str] = Field(default=None, max_length=MAX_NOTES_LENGTH, description="Work notes")

    @field_validator('notes')
    @classmethod
    def blank_notes_to_none(cls, v):
        if v is not None and len(v.strip()) == 0:
            return None
        return v


class UpdateTimeEntryRequestDTO(RequestDTO):
    """DTO for time entry update requests. Omitted fields are left unchanged."""

    hours: Optional[Decimal] = Field(default=None, gt=0, le=24, decimal_places=2, description="Hours worked")
    is_billable: Optional[bool] = Field(default=None, description="Whether time is billable")
    hourly_rate: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2, description="Hourly rate")
    notes: Optional[str] = Field(default=None, max_length=MAX_NOTES_LENGTH, description="Work notes")


class UpdateTimeEntryCommandDTO(UpdateTimeEntryRequestDTO):
    """Update request bound to the entry it targets."""

    entry_id: int = Field(description="Time entry ID")


class DeleteTimeEntryRequestDTO(RequestDTO):
    """DTO for time entry deletion."""

    entry_id: int = Field(description="Time entry ID")


class ListTimeEntriesRequestDTO(RequestDTO):
    """DTO for listing time entries. ``user_id`` is honoured for managers only."""

    user_id: Optional[str] = Field(default=None, description="Filter by user (managers only)")
    project_id: Optional[int] = Field(default=None, description="Filter by project")
    client_id: Optional[int] = Field(default=None, description="Filter by client")
    start_date: Optional[dt.date] = Field(default=None, description="Filter from date (inclusive)")
    end_date: Optional[dt.date] = Field(default=None, description="Filter to date (inclusive)")


class WeeklySummaryRequestDTO(RequestDTO):
    """DTO for the caller's time summary over a date window."""

    start_date: Optional[dt.date] = Field(default=None, description="First day (inclusive)")
    end_date: Optional[dt.date] = Field(default=None, description="Last day (inclusive)")


# Response DTOs
class TimeEntryResponseDTO(ResponseDTO):
    """DTO for time entry responses."""

    user_id: str
    project_id: int
    project_name: Optional[str] = None
    client_name: Optional[str] = None
    task_id: int
    task_name: Optional[str] = None
    date: dt.date
    hours: Hours
    is_billable: bool
    hourly_rate: Optional[Hours] = None
    notes: Optional[str] = None
    timesheet_id: Optional[int] = None

    @classmethod
    def from_domain(cls, entry: TimeEntry) -> "TimeEntryResponseDTO":
        return cls(
            id=entry.id,
            user_id=entry.user_id,
            project_id=entry.project_id,
            project_name=entry.project_name,
            client_name=entry.client_name,
            task_id=entry.task_id,
            task_name=entry.task_name,
            date=entry.date,
            hours=entry.hours,
            is_billable=entry.is_billable,
            hourly_rate=entry.hourly_rate,
            notes=entry.notes,
            timesheet_id=entry.timesheet_id,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )


class ProjectHoursDTO(BaseDTO):
    """Hours grouped under one project."""

    project_id: int
    name: Optional[str] = None
    client_name: Optional[str] = None
    hours: Hours

    @classmethod
    def from_domain(cls, group: ProjectHours) -> "ProjectHoursDTO":
        return cls(
            project_id=group.project_id,
            name=group.name,
            client_name=group.client_name,
            hours=group.hours,
        )


class TimeSummaryResponseDTO(BaseDTO):
    """Billable / non-billable totals with per-day and per-project groupings."""

    total_hours: Hours
    billable_hours: Hours
    non_billable_hours: Hours
    billable_percentage: Hours
    by_day: Dict[str, Hours] = Field(default_factory=dict)
    by_project: List[ProjectHoursDTO] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, summary: TimeSummary) -> "TimeSummaryResponseDTO":
        return cls(
            total_hours=summary.total_hours,
            billable_hours=summary.billable_hours,
            non_billable_hours=summary.non_billable_hours,
            billable_percentage=summary.billable_percentage,
            by_day={day.isoformat(): hours for day, hours in sorted(summary.by_day.items())},
            by_project=[ProjectHoursDTO.from_domain(group) for group in summary.by_project],
        )


class WeeklySummaryResponseDTO(TimeSummaryResponseDTO):
    """Time summary for an explicit date window."""

    start_date: dt.date
    end_date: dt.date
