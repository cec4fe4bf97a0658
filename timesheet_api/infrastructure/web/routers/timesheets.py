"""
Timesheets router.
Handles weekly timesheets and their submission and approval workflow.
"""

from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Query

from timesheet_api.application.dto.base_dto import RequestDTO
from timesheet_api.application.dto.time_entry_dto import TimeEntryResponseDTO
from timesheet_api.application.dto.timesheet_dto import (
    CreateTimesheetRequestDTO,
    TimesheetRequestDTO,
    RejectTimesheetBodyDTO,
    RejectTimesheetRequestDTO,
    ListTimesheetsRequestDTO,
    UserSummaryDTO,
    TimesheetResponseDTO,
    ApprovalResponseDTO,
    TimesheetDetailResponseDTO,
    SubmissionResponseDTO,
    DecisionResponseDTO,
    PendingApprovalResponseDTO,
    summary_to_dto,
)
from timesheet_api.application.use_cases.timesheet_use_cases import (
    GetOrCreateTimesheetUseCase,
    GetTimesheetUseCase,
    ListTimesheetsUseCase,
    SubmitTimesheetUseCase,
    ApproveTimesheetUseCase,
    RejectTimesheetUseCase,
    ReopenTimesheetUseCase,
    ListPendingApprovalsUseCase,
    TimesheetDetails,
    DecisionOutcome,
)
from timesheet_api.domain.models.timesheet import TimesheetStatus
from timesheet_api.infrastructure.auth.dependencies import CurrentContext, ManagerContext
from timesheet_api.infrastructure.web.dependencies import UnitOfWorkDep, SettingsDep
from timesheet_api.infrastructure.web.middleware.error_handler import unwrap


router = APIRouter()


def _details_to_dto(details: TimesheetDetails) -> TimesheetDetailResponseDTO:
    return TimesheetDetailResponseDTO.from_domain(
        details.timesheet,
        user=UserSummaryDTO.from_domain(details.user) if details.user else None,
        entries=[TimeEntryResponseDTO.from_domain(entry) for entry in details.entries],
        approvals=[ApprovalResponseDTO.from_domain(approval) for approval in details.approvals],
        summary=summary_to_dto(details.summary),
    )


def _decision_to_dto(outcome: DecisionOutcome) -> Dict[str, Any]:
    return DecisionResponseDTO(
        timesheet=TimesheetResponseDTO.from_domain(outcome.timesheet),
        approval=ApprovalResponseDTO.from_domain(outcome.approval),
    ).model_dump(mode="json")


@router.post("")
async def get_or_create_timesheet(
    request: CreateTimesheetRequestDTO,
    context: CurrentContext,
    uow: UnitOfWorkDep
) -> Dict[str, Any]:
    """
    Get the caller's timesheet for a week, creating it when it does not exist.

    - **week_start**: First day of the week
    """
    details = unwrap(await GetOrCreateTimesheetUseCase(uow).execute(request, context))
    return {
        "message": "Timesheet retrieved successfully",
        "timesheet": _details_to_dto(details).model_dump(mode="json"),
    }


@router.get("")
async def list_timesheets(
    context: CurrentContext,
    uow: UnitOfWorkDep,
    user_id: Optional[str] = Query(None, description="Owner of the timesheets (managers only)"),
    status: Optional[TimesheetStatus] = Query(None, description="Filter by status"),
    start_date: Optional[date] = Query(None, description="Earliest week start"),
    end_date: Optional[date] = Query(None, description="Latest week start"),
) -> Dict[str, Any]:
    """List timesheets, newest week first."""
    request = ListTimesheetsRequestDTO(
        user_id=user_id, status=status, start_date=start_date, end_date=end_date
    )
    timesheets = unwrap(await ListTimesheetsUseCase(uow).execute(request, context))
    return {
        "message": "Timesheets retrieved successfully",
        "timesheets": [TimesheetResponseDTO.from_domain(t).model_dump(mode="json") for t in timesheets],
        "total": len(timesheets),
    }


@router.get("/pending-approvals")
async def list_pending_approvals(
    context: ManagerContext,
    uow: UnitOfWorkDep
) -> Dict[str, Any]:
    """Pending approvals addressed to the caller, with submitter and entries."""
    pending = unwrap(await ListPendingApprovalsUseCase(uow).execute(RequestDTO(), context))
    approvals = [
        PendingApprovalResponseDTO.from_domain(
            item.approval,
            submitter=UserSummaryDTO.from_domain(item.submitter) if item.submitter else None,
            timesheet=TimesheetResponseDTO.from_domain(item.timesheet),
            entries=[TimeEntryResponseDTO.from_domain(entry) for entry in item.entries],
        ).model_dump(mode="json")
        for item in pending
    ]
    return {
        "message": "Pending approvals retrieved successfully",
        "approvals": approvals,
        "total": len(approvals),
    }


@router.get("/{timesheet_id}")
async def get_timesheet(
    timesheet_id: int,
    context: CurrentContext,
    uow: UnitOfWorkDep
) -> Dict[str, Any]:
    """Get a timesheet with its owner, entries, approvals and live totals."""
    details = unwrap(
        await GetTimesheetUseCase(uow).execute(TimesheetRequestDTO(timesheet_id=timesheet_id), context)
    )
    return {
        "message": "Timesheet retrieved successfully",
        "timesheet": _details_to_dto(details).model_dump(mode="json"),
    }


@router.post("/{timesheet_id}/submit")
async def submit_timesheet(
    timesheet_id: int,
    context: CurrentContext,
    uow: UnitOfWorkDep
) -> Dict[str, Any]:
    """Submit a draft timesheet to the owner's manager."""
    outcome = unwrap(
        await SubmitTimesheetUseCase(uow).execute(TimesheetRequestDTO(timesheet_id=timesheet_id), context)
    )
    submission = SubmissionResponseDTO(
        timesheet=TimesheetResponseDTO.from_domain(outcome.timesheet),
        approval=ApprovalResponseDTO.from_domain(outcome.approval) if outcome.approval else None,
        summary=summary_to_dto(outcome.summary),
    )
    return {"message": "Timesheet submitted successfully", **submission.model_dump(mode="json")}


@router.post("/{timesheet_id}/approve")
async def approve_timesheet(
    timesheet_id: int,
    context: ManagerContext,
    uow: UnitOfWorkDep
) -> Dict[str, Any]:
    """Approve a submitted timesheet addressed to the caller."""
    outcome = unwrap(
        await ApproveTimesheetUseCase(uow).execute(TimesheetRequestDTO(timesheet_id=timesheet_id), context)
    )
    return {"message": "Timesheet approved successfully", **_decision_to_dto(outcome)}


@router.post("/{timesheet_id}/reject")
async def reject_timesheet(
    timesheet_id: int,
    context: ManagerContext,
    uow: UnitOfWorkDep,
    body: Optional[RejectTimesheetBodyDTO] = None
) -> Dict[str, Any]:
    """
    Reject a submitted timesheet addressed to the caller.

    - **rejection_reason**: Why the timesheet was rejected (required)
    """
    request = RejectTimesheetRequestDTO(
        timesheet_id=timesheet_id,
        rejection_reason=body.rejection_reason if body else None,
    )
    outcome = unwrap(await RejectTimesheetUseCase(uow).execute(request, context))
    return {"message": "Timesheet rejected successfully", **_decision_to_dto(outcome)}


@router.post("/{timesheet_id}/reopen")
async def reopen_timesheet(
    timesheet_id: int,
    context: CurrentContext,
    uow: UnitOfWorkDep,
    settings: SettingsDep
) -> Dict[str, Any]:
    """Return a rejected timesheet to draft, where the deployment allows it."""
    use_case = ReopenTimesheetUseCase(uow, enabled=settings.allow_reopen_rejected)
    timesheet = unwrap(await use_case.execute(TimesheetRequestDTO(timesheet_id=timesheet_id), context))
    return {
        "message": "Timesheet reopened successfully",
        "timesheet": TimesheetResponseDTO.from_domain(timesheet).model_dump(mode="json"),
    }
