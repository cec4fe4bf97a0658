"""
TimesheetApproval domain model.
One manager's pending or resolved decision on a submitted timesheet.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from timesheet_api.domain.models.base import BaseEntity, ValidationError, InvalidTransitionError


class ApprovalStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


@dataclass(eq=False)
class TimesheetApproval(BaseEntity):
    """
    Approval record created once per submission, addressed to the
    submitter's manager at submission time. ``rejection_reason`` is set
    if and only if the approval was rejected.
    """

    timesheet_id: int = 0
    approver_id: str = ""
    submitter_id: str = ""
    status: ApprovalStatus = ApprovalStatus.PENDING
    rejection_reason: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None

    @classmethod
    def request(cls, timesheet_id: int, approver_id: str, submitter_id: str) -> "TimesheetApproval":
        return cls(
            timesheet_id=timesheet_id,
            approver_id=approver_id,
            submitter_id=submitter_id,
            status=ApprovalStatus.PENDING,
        )

    def validate(self) -> None:
        if not self.approver_id:
            raise ValidationError("Approver ID is required", "approver_id")
        if self.status == ApprovalStatus.REJECTED and not self.rejection_reason:
            raise ValidationError("Rejection reason is required", "rejection_reason")
        if self.status != ApprovalStatus.REJECTED and self.rejection_reason is not None:
            raise ValidationError("Only rejected approvals carry a reason", "rejection_reason")

    @property
    def is_pending(self) -> bool:
        return self.status == ApprovalStatus.PENDING

    def _require_pending(self) -> None:
        if not self.is_pending:
            raise InvalidTransitionError(
                f"Approval already {self.status.value.lower()}",
                current_status=self.status.value,
            )

    def approve(self, at: Optional[datetime] = None) -> None:
        self._require_pending()
        self.status = ApprovalStatus.APPROVED
        self.approved_at = at or datetime.utcnow()
        self.mark_as_updated()

    def reject(self, reason: str, at: Optional[datetime] = None) -> None:
        reason = normalize_reason(reason)
        self._require_pending()
        self.status = ApprovalStatus.REJECTED
        self.rejection_reason = reason
        self.rejected_at = at or datetime.utcnow()
        self.mark_as_updated()


def normalize_reason(reason: Optional[str]) -> str:
    """Return the reason unchanged, or raise if it is missing or blank."""
    if reason is None or not reason.strip():
        raise ValidationError("Rejection reason is required", "rejection_reason")
    return reason
