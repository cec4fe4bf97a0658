"""
Time entries router.
Handles logging and correcting worked hours, and time summaries.
"""

from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Query, status

from timesheet_api.application.dto.time_entry_dto import (
    CreateTimeEntryRequestDTO,
    UpdateTimeEntryRequestDTO,
    UpdateTimeEntryCommandDTO,
    DeleteTimeEntryRequestDTO,
    ListTimeEntriesRequestDTO,
    WeeklySummaryRequestDTO,
    TimeEntryResponseDTO,
    TimeSummaryResponseDTO,
    WeeklySummaryResponseDTO,
)
from timesheet_api.application.use_cases.time_entry_use_cases import (
    CreateTimeEntryUseCase,
    UpdateTimeEntryUseCase,
    DeleteTimeEntryUseCase,
    ListTimeEntriesUseCase,
    WeeklySummaryUseCase,
)
from timesheet_api.infrastructure.auth.dependencies import CurrentContext
from timesheet_api.infrastructure.web.dependencies import UnitOfWorkDep
from timesheet_api.infrastructure.web.middleware.error_handler import unwrap


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_time_entry(
    request: CreateTimeEntryRequestDTO,
    context: CurrentContext,
    uow: UnitOfWorkDep
) -> Dict[str, Any]:
    """
    Log hours for the caller.

    - **project_id**: Project ID
    - **task_id**: Task ID, must belong to the project
    - **date**: Day the work was done
    - **hours**: Hours worked (0 < hours <= 24)
    - **is_billable**: Defaults to the task's billable flag
    - **hourly_rate**: Defaults to the task's rate
    - **notes**: Work notes
    """
    entry = unwrap(await CreateTimeEntryUseCase(uow).execute(request, context))
    return {
        "message": "Time entry created successfully",
        "time_entry": TimeEntryResponseDTO.from_domain(entry).model_dump(mode="json"),
    }


@router.get("")
async def list_time_entries(
    context: CurrentContext,
    uow: UnitOfWorkDep,
    user_id: Optional[str] = Query(None, description="Filter by user (managers only)"),
    project_id: Optional[int] = Query(None, description="Filter by project ID"),
    client_id: Optional[int] = Query(None, description="Filter by client ID"),
    start_date: Optional[date] = Query(None, description="Filter from date (inclusive)"),
    end_date: Optional[date] = Query(None, description="Filter to date (inclusive)"),
) -> Dict[str, Any]:
    """List time entries, newest first."""
    request = ListTimeEntriesRequestDTO(
        user_id=user_id,
        project_id=project_id,
        client_id=client_id,
        start_date=start_date,
        end_date=end_date,
    )
    entries = unwrap(await ListTimeEntriesUseCase(uow).execute(request, context))
    return {
        "message": "Time entries retrieved successfully",
        "time_entries": [TimeEntryResponseDTO.from_domain(e).model_dump(mode="json") for e in entries],
        "total": len(entries),
    }


@router.get("/weekly-summary")
async def weekly_summary(
    context: CurrentContext,
    uow: UnitOfWorkDep,
    start_date: Optional[date] = Query(None, description="First day (inclusive)"),
    end_date: Optional[date] = Query(None, description="Last day (inclusive)"),
) -> Dict[str, Any]:
    """Billable / non-billable totals of the caller, by day and by project."""
    request = WeeklySummaryRequestDTO(start_date=start_date, end_date=end_date)
    weekly = unwrap(await WeeklySummaryUseCase(uow).execute(request, context))
    summary = WeeklySummaryResponseDTO(
        start_date=weekly.start_date,
        end_date=weekly.end_date,
        **TimeSummaryResponseDTO.from_domain(weekly.summary).model_dump(),
    )
    return {"message": "Weekly summary retrieved successfully", "summary": summary.model_dump(mode="json")}


@router.put("/{entry_id}")
async def update_time_entry(
    entry_id: int,
    request: UpdateTimeEntryRequestDTO,
    context: CurrentContext,
    uow: UnitOfWorkDep
) -> Dict[str, Any]:
    """Correct an entry whose timesheet is still a draft."""
    command = UpdateTimeEntryCommandDTO(entry_id=entry_id, **request.model_dump())
    entry = unwrap(await UpdateTimeEntryUseCase(uow).execute(command, context))
    return {
        "message": "Time entry updated successfully",
        "time_entry": TimeEntryResponseDTO.from_domain(entry).model_dump(mode="json"),
    }


@router.delete("/{entry_id}")
async def delete_time_entry(
    entry_id: int,
    context: CurrentContext,
    uow: UnitOfWorkDep
) -> Dict[str, Any]:
    """Delete an entry whose timesheet is still a draft."""
    unwrap(await DeleteTimeEntryUseCase(uow).execute(DeleteTimeEntryRequestDTO(entry_id=entry_id), context))
    return {"message": "Time entry deleted successfully"}
