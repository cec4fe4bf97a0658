"""
Timesheet workflow domain events.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Any, Optional

from .base import DomainEvent


@dataclass
class TimesheetSubmittedEvent(DomainEvent):
    """Raised when a draft timesheet is submitted for approval."""

    timesheet_id: int
    user_id: str
    approver_id: Optional[str]
    total_hours: Decimal

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "timesheet_id": self.timesheet_id,
            "user_id": self.user_id,
            "approver_id": self.approver_id,
            "total_hours": float(self.total_hours),
        }


@dataclass
class TimesheetApprovedEvent(DomainEvent):
    """Raised when a manager approves a submitted timesheet."""

    timesheet_id: int
    user_id: str
    approver_id: str

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "timesheet_id": self.timesheet_id,
            "user_id": self.user_id,
            "approver_id": self.approver_id,
        }


@dataclass
class TimesheetRejectedEvent(DomainEvent):
    """Raised when a manager rejects a submitted timesheet."""

    timesheet_id: int
    user_id: str
    approver_id: str
    reason: str

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "timesheet_id": self.timesheet_id,
            "user_id": self.user_id,
            "approver_id": self.approver_id,
            "reason": self.reason,
        }


@dataclass
class TimesheetReopenedEvent(DomainEvent):
    """Raised when a rejected timesheet is returned to draft."""

    timesheet_id: int
    user_id: str

    def _get_event_data(self) -> Dict[str, Any]:
        return {"timesheet_id": self.timesheet_id, "user_id": self.user_id}
