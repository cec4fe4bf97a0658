"""
Timesheet DTOs for the application layer.
Data Transfer Objects for the weekly timesheet and approval workflow.
"""

import datetime as dt
from typing import List, Optional

from pydantic import Field

from timesheet_api.domain.models.approval import TimesheetApproval, ApprovalStatus
from timesheet_api.domain.models.timesheet import Timesheet, TimesheetStatus
from timesheet_api.domain.models.user import User
from timesheet_api.domain.services.time_aggregator import TimeSummary
from .base_dto import BaseDTO, RequestDTO, ResponseDTO, Hours
from .time_entry_dto import TimeEntryResponseDTO, TimeSummaryResponseDTO


# Request DTOs
class CreateTimesheetRequestDTO(RequestDTO):
    """DTO for opening (or fetching) the caller's timesheet for a week."""

    week_start: dt.date = Field(description="First day of the week")


class TimesheetRequestDTO(RequestDTO):
    """DTO for operations addressing a single timesheet."""

    timesheet_id: int = Field(description="Timesheet ID")


class RejectTimesheetBodyDTO(RequestDTO):
    """Body of a reject request."""

    rejection_reason: Optional[str] = Field(
        default=None, alias="rejectionReason", description="Why the timesheet was rejected"
    )


class RejectTimesheetRequestDTO(TimesheetRequestDTO, RejectTimesheetBodyDTO):
    """Reject request bound to the timesheet it targets."""
    pass


class ListTimesheetsRequestDTO(RequestDTO):
    """DTO for listing timesheets. ``user_id`` is honoured for managers only."""

    user_id: Optional[str] = Field(default=None, description="Owner of the timesheets")
    status: Optional[TimesheetStatus] = Field(default=None, description="Filter by status")
    start_date: Optional[dt.date] = Field(default=None, description="Earliest week start")
    end_date: Optional[dt.date] = Field(default=None, description="Latest week start")


# Response DTOs
class UserSummaryDTO(BaseDTO):
    """Public identity of a user."""

    id: str
    email: str
    first_name: str
    last_name: str
    position: Optional[str] = None
    department_name: Optional[str] = None

    @classmethod
    def from_domain(cls, user: User) -> "UserSummaryDTO":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            position=user.position,
            department_name=user.department_name,
        )


class TimesheetResponseDTO(ResponseDTO):
    """DTO for timesheet responses."""

    user_id: str
    week_start: dt.date
    week_end: dt.date
    status: TimesheetStatus
    total_hours: Hours
    billable_hours: Hours
    non_billable_hours: Hours
    submitted_at: Optional[dt.datetime] = None

    @classmethod
    def from_domain(cls, timesheet: Timesheet, **extra) -> "TimesheetResponseDTO":
        return cls(
            id=timesheet.id,
            user_id=timesheet.user_id,
            week_start=timesheet.week_start,
            week_end=timesheet.week_end,
            status=timesheet.status,
            total_hours=timesheet.total_hours,
            billable_hours=timesheet.billable_hours,
            non_billable_hours=timesheet.non_billable_hours,
            submitted_at=timesheet.submitted_at,
            created_at=timesheet.created_at,
            updated_at=timesheet.updated_at,
            **extra,
        )


class ApprovalResponseDTO(ResponseDTO):
    """DTO for timesheet approval responses."""

    timesheet_id: int
    approver_id: str
    submitter_id: str
    status: ApprovalStatus
    rejection_reason: Optional[str] = None
    approved_at: Optional[dt.datetime] = None
    rejected_at: Optional[dt.datetime] = None

    @classmethod
    def from_domain(cls, approval: TimesheetApproval, **extra) -> "ApprovalResponseDTO":
        return cls(
            id=approval.id,
            timesheet_id=approval.timesheet_id,
            approver_id=approval.approver_id,
            submitter_id=approval.submitter_id,
            status=approval.status,
            rejection_reason=approval.rejection_reason,
            approved_at=approval.approved_at,
            rejected_at=approval.rejected_at,
            created_at=approval.created_at,
            updated_at=approval.updated_at,
            **extra,
        )


class TimesheetDetailResponseDTO(TimesheetResponseDTO):
    """Timesheet with its owner, entries, approvals and a live summary."""

    user: Optional[UserSummaryDTO] = None
    entries: List[TimeEntryResponseDTO] = Field(default_factory=list)
    approvals: List[ApprovalResponseDTO] = Field(default_factory=list)
    summary: Optional[TimeSummaryResponseDTO] = None


class SubmissionResponseDTO(BaseDTO):
    """Outcome of a submission: the snapshot, its approval and the breakdown."""

    timesheet: TimesheetResponseDTO
    approval: Optional[ApprovalResponseDTO] = None
    summary: TimeSummaryResponseDTO


class DecisionResponseDTO(BaseDTO):
    """Outcome of an approve or reject decision."""

    timesheet: TimesheetResponseDTO
    approval: ApprovalResponseDTO


class PendingApprovalResponseDTO(ApprovalResponseDTO):
    """Pending approval with the submitter, the timesheet and its entries."""

    submitter: Optional[UserSummaryDTO] = None
    timesheet: TimesheetResponseDTO
    entries: List[TimeEntryResponseDTO] = Field(default_factory=list)


def summary_to_dto(summary: Optional[TimeSummary]) -> Optional[TimeSummaryResponseDTO]:
    if summary is None:
        return None
    return TimeSummaryResponseDTO.from_domain(summary)
