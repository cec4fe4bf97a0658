"""
TimeEntry domain model.
Represents one day's logged hours against a project task.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, Any

from timesheet_api.domain.models.base import BaseEntity, ValidationError


MAX_HOURS_PER_ENTRY = Decimal("24")
MAX_NOTES_LENGTH = 2000
# Matches the NUMERIC scale of the hours and rate columns
MAX_DECIMAL_PLACES = 2


def to_hours(value: Any, field: str = "hours") -> Decimal:
    """Coerce a user supplied number into a Decimal of hours."""
    if isinstance(value, Decimal):
        return value
    try:
        # str() keeps floats like 7.5 exact instead of their binary expansion
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Invalid number of hours: {value!r}", field)


def decimal_places(value: Decimal) -> int:
    """Significant digits after the point; trailing zeros do not count."""
    exponent = value.normalize().as_tuple().exponent
    return -exponent if exponent < 0 else 0


@dataclass(eq=False)
class TimeEntry(BaseEntity):
    """
    TimeEntry entity.

    ``timesheet_id`` is a nullable back-reference: an entry may exist before
    any timesheet covers its week. ``project_name``, ``client_name`` and
    ``task_name`` are read-only display attributes filled in by the
    repository.
    """

    user_id: str = ""
    project_id: int = 0
    task_id: int = 0
    date: date = None
    hours: Decimal = Decimal("0")
    is_billable: bool = True
    hourly_rate: Optional[Decimal] = None
    notes: Optional[str] = None
    timesheet_id: Optional[int] = None

    project_name: Optional[str] = None
    client_name: Optional[str] = None
    task_name: Optional[str] = None

    def __post_init__(self):
        super().__post_init__()
        self.hours = to_hours(self.hours)
        if self.hourly_rate is not None:
            self.hourly_rate = to_hours(self.hourly_rate, "hourly_rate")

    def validate(self) -> None:
        """Validate time entry state."""
        if not self.user_id:
            raise ValidationError("User ID is required", "user_id")

        if not self.project_id:
            raise ValidationError("Project ID is required", "project_id")

        if not self.task_id:
            raise ValidationError("Task ID is required", "task_id")

        if not isinstance(self.date, date):
            raise ValidationError("Date is required", "date")

        if self.hours <= 0:
            raise ValidationError("Hours must be positive", "hours")

        if self.hours > MAX_HOURS_PER_ENTRY:
            raise ValidationError("Hours cannot exceed 24 per entry", "hours")

        if decimal_places(self.hours) > MAX_DECIMAL_PLACES:
            raise ValidationError("Hours cannot have more than 2 decimal places", "hours")

        if self.hourly_rate is not None and self.hourly_rate < 0:
            raise ValidationError("Hourly rate cannot be negative", "hourly_rate")

        if self.hourly_rate is not None and decimal_places(self.hourly_rate) > MAX_DECIMAL_PLACES:
            raise ValidationError("Hourly rate cannot have more than 2 decimal places", "hourly_rate")

        if self.notes and len(self.notes) > MAX_NOTES_LENGTH:
            raise ValidationError("Notes too long (max 2000 characters)", "notes")

    @property
    def is_attached(self) -> bool:
        return self.timesheet_id is not None

    @property
    def billable_amount(self) -> Decimal:
        if not self.is_billable or self.hourly_rate is None:
            return Decimal("0")
        return self.hours * self.hourly_rate

    def attach_to(self, timesheet_id: int) -> None:
        self.timesheet_id = timesheet_id
        self.mark_as_updated()

    def update_details(
        self,
        hours: Optional[Any] = None,
        is_billable: Optional[bool] = None,
        hourly_rate: Optional[Any] = None,
        notes: Optional[str] = None,
    ) -> None:
        """
        Apply a partial update. Fields left as None are unchanged.
        The caller is responsible for the timesheet lock check.
        """
        if hours is not None:
            self.hours = to_hours(hours)
        if is_billable is not None:
            self.is_billable = is_billable
        if hourly_rate is not None:
            self.hourly_rate = to_hours(hourly_rate, "hourly_rate")
        if notes is not None:
            self.notes = notes

        self.validate()
        self.mark_as_updated()
