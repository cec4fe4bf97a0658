"""
Timesheet and approval mappers for converting between domain entities and database models.
"""

from decimal import Decimal

from timesheet_api.domain.models.approval import TimesheetApproval, ApprovalStatus
from timesheet_api.domain.models.timesheet import Timesheet, TimesheetStatus
from timesheet_api.infrastructure.db.models import TimesheetModel, TimesheetApprovalModel


def _decimal(value) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


class TimesheetMapper:
    """Maps between Timesheet domain entity and TimesheetModel database model."""

    def domain_to_model(self, timesheet: Timesheet) -> TimesheetModel:
        """Convert Timesheet domain entity to TimesheetModel."""
        return TimesheetModel(
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
        )

    def transition_values(self, timesheet: Timesheet) -> dict:
        """Column values written by a status transition."""
        return {
            "status": timesheet.status,
            "total_hours": timesheet.total_hours,
            "billable_hours": timesheet.billable_hours,
            "non_billable_hours": timesheet.non_billable_hours,
            "submitted_at": timesheet.submitted_at,
            "updated_at": timesheet.updated_at,
        }

    def model_to_domain(self, model: TimesheetModel) -> Timesheet:
        """Convert TimesheetModel to Timesheet domain entity."""
        return Timesheet(
            id=model.id,
            user_id=model.user_id,
            week_start=model.week_start,
            week_end=model.week_end,
            status=TimesheetStatus(model.status) if model.status else TimesheetStatus.DRAFT,
            total_hours=_decimal(model.total_hours),
            billable_hours=_decimal(model.billable_hours),
            non_billable_hours=_decimal(model.non_billable_hours),
            submitted_at=model.submitted_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


class ApprovalMapper:
    """Maps between TimesheetApproval and TimesheetApprovalModel."""

    def domain_to_model(self, approval: TimesheetApproval) -> TimesheetApprovalModel:
        return TimesheetApprovalModel(
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
        )

    def decision_values(self, approval: TimesheetApproval) -> dict:
        """Column values written when an approval is resolved."""
        return {
            "status": approval.status,
            "rejection_reason": approval.rejection_reason,
            "approved_at": approval.approved_at,
            "rejected_at": approval.rejected_at,
            "updated_at": approval.updated_at,
        }

    def model_to_domain(self, model: TimesheetApprovalModel) -> TimesheetApproval:
        return TimesheetApproval(
            id=model.id,
            timesheet_id=model.timesheet_id,
            approver_id=model.approver_id,
            submitter_id=model.submitter_id,
            status=ApprovalStatus(model.status) if model.status else ApprovalStatus.PENDING,
            rejection_reason=model.rejection_reason,
            approved_at=model.approved_at,
            rejected_at=model.rejected_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
