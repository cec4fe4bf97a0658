"""Timesheet workflow rules.
Pure checks shared by the timesheet and time entry use cases.
"""

from typing import Optional

from timesheet_api.domain.models.base import ForbiddenError, LockedTimesheetError
from timesheet_api.domain.models.time_entry import TimeEntry
from timesheet_api.domain.models.timesheet import Timesheet
from timesheet_api.domain.models.user import UserRole


def can_mutate(entry: TimeEntry, timesheet: Optional[Timesheet]) -> bool:
    """
    An entry may be created, edited or deleted while it is unattached or
    while its parent timesheet is still a draft.
    """
    if entry.timesheet_id is None:
        return True
    if timesheet is None:
        # Dangling reference; nothing left to protect
        return True
    return timesheet.is_editable


def ensure_can_mutate(entry: TimeEntry, timesheet: Optional[Timesheet], action: str = "edit") -> None:
    if not can_mutate(entry, timesheet):
        raise LockedTimesheetError(
            f"Cannot {action} time entry in {timesheet.status.value.lower()} timesheet",
            timesheet_id=timesheet.id,
        )


def is_owner_or_elevated(owner_id: str, user_id: str, role: UserRole) -> bool:
    return owner_id == user_id or UserRole(role).is_elevated


def ensure_owner_or_elevated(owner_id: str, user_id: str, role: UserRole) -> None:
    if not is_owner_or_elevated(owner_id, user_id, role):
        raise ForbiddenError("Forbidden")
