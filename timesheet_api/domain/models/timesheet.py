"""
Timesheet domain model.
Weekly container aggregating one user's time entries for approval.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

from timesheet_api.domain.events.timesheet_events import (
    TimesheetSubmittedEvent,
    TimesheetApprovedEvent,
    TimesheetRejectedEvent,
    TimesheetReopenedEvent,
)
from timesheet_api.domain.models.base import (
    BaseEntity,
    WeekRange,
    ValidationError,
    InvalidTransitionError,
)


ZERO = Decimal("0")


class TimesheetStatus(str, Enum):
    """Timesheet lifecycle states."""
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


@dataclass(eq=False)
class Timesheet(BaseEntity):
    """
    Timesheet aggregate root.

    Totals are a snapshot written at submission time; they are not kept in
    sync with entries afterwards. ``week_end`` is always ``week_start + 6``.
    """

    user_id: str = ""
    week_start: date = None
    week_end: Optional[date] = None
    status: TimesheetStatus = TimesheetStatus.DRAFT
    total_hours: Decimal = ZERO
    billable_hours: Decimal = ZERO
    non_billable_hours: Decimal = ZERO
    submitted_at: Optional[datetime] = None

    def __post_init__(self):
        super().__post_init__()
        if self.week_start is not None and self.week_end is None:
            self.week_end = WeekRange(self.week_start).end

    @classmethod
    def open_week(cls, user_id: str, week_start: date) -> "Timesheet":
        """Create an empty draft timesheet for the week starting at ``week_start``."""
        week = WeekRange(week_start)
        timesheet = cls(user_id=user_id, week_start=week.start, week_end=week.end)
        timesheet.validate()
        return timesheet

    def validate(self) -> None:
        if not self.user_id:
            raise ValidationError("User ID is required", "user_id")
        if not isinstance(self.week_start, date):
            raise ValidationError("Week start is required", "week_start")
        if self.week_end != WeekRange(self.week_start).end:
            raise ValidationError("Week end must be six days after week start", "week_end")
        if self.total_hours != self.billable_hours + self.non_billable_hours:
            raise ValidationError("Total hours must equal billable plus non-billable hours", "total_hours")

    @property
    def week(self) -> WeekRange:
        return WeekRange(self.week_start)

    @property
    def is_draft(self) -> bool:
        return self.status == TimesheetStatus.DRAFT

    @property
    def is_editable(self) -> bool:
        """Entries may only change while the timesheet is a draft."""
        return self.is_draft

    def covers(self, day: date) -> bool:
        return self.week.contains(day)

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id

    def _require_status(self, expected: TimesheetStatus, action: str) -> None:
        if self.status != expected:
            raise InvalidTransitionError(
                f"Cannot {action} a timesheet in {self.status.value} status",
                current_status=self.status.value,
            )

    def submit(
        self,
        billable_hours: Decimal,
        non_billable_hours: Decimal,
        approver_id: Optional[str] = None,
        submitted_at: Optional[datetime] = None,
    ) -> None:
        """Snapshot the totals and move DRAFT -> SUBMITTED."""
        self._require_status(TimesheetStatus.DRAFT, "submit")

        self.billable_hours = billable_hours
        self.non_billable_hours = non_billable_hours
        self.total_hours = billable_hours + non_billable_hours
        self.status = TimesheetStatus.SUBMITTED
        self.submitted_at = submitted_at or datetime.utcnow()
        self.mark_as_updated()

        self.add_event(TimesheetSubmittedEvent(
            timesheet_id=self.id,
            user_id=self.user_id,
            approver_id=approver_id,
            total_hours=self.total_hours,
        ))

    def approve(self, approver_id: str) -> None:
        self._require_status(TimesheetStatus.SUBMITTED, "approve")
        self.status = TimesheetStatus.APPROVED
        self.mark_as_updated()
        self.add_event(TimesheetApprovedEvent(
            timesheet_id=self.id,
            user_id=self.user_id,
            approver_id=approver_id,
        ))

    def reject(self, approver_id: str, reason: str) -> None:
        self._require_status(TimesheetStatus.SUBMITTED, "reject")
        self.status = TimesheetStatus.REJECTED
        self.mark_as_updated()
        self.add_event(TimesheetRejectedEvent(
            timesheet_id=self.id,
            user_id=self.user_id,
            approver_id=approver_id,
            reason=reason,
        ))

    def reopen(self) -> None:
        """Return a rejected timesheet to draft so its entries can be corrected."""
        self._require_status(TimesheetStatus.REJECTED, "reopen")
        self.status = TimesheetStatus.DRAFT
        self.total_hours = ZERO
        self.billable_hours = ZERO
        self.non_billable_hours = ZERO
        self.submitted_at = None
        self.mark_as_updated()
        self.add_event(TimesheetReopenedEvent(timesheet_id=self.id, user_id=self.user_id))
