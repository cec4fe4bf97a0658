"""
Typed query options for repository lookups.
Every field is optional; fields that are set are combined with AND and
date bounds are inclusive.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from timesheet_api.domain.models.base import ValidationError
from timesheet_api.domain.models.timesheet import TimesheetStatus


def _check_range(start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date and end_date and end_date < start_date:
        raise ValidationError("end_date must not be before start_date", "end_date")


@dataclass(frozen=True)
class TimeEntryFilter:
    """Recognized fields when listing time entries."""

    user_id: Optional[str] = None
    project_id: Optional[int] = None
    client_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    timesheet_id: Optional[int] = None
    unattached_only: bool = False

    def __post_init__(self):
        _check_range(self.start_date, self.end_date)


@dataclass(frozen=True)
class TimesheetFilter:
    """Recognized fields when listing timesheets; dates bound ``week_start``."""

    user_id: Optional[str] = None
    status: Optional[TimesheetStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def __post_init__(self):
        _check_range(self.start_date, self.end_date)
