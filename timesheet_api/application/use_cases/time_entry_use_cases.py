"""
Time Entry use cases for the application layer.
Implements logging, correcting and reporting of worked hours.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from timesheet_api.application.use_cases.base_use_case import (
    CommandUseCase, QueryUseCase, UseCaseContext
)
from timesheet_api.application.dto.time_entry_dto import (
    CreateTimeEntryRequestDTO, UpdateTimeEntryCommandDTO, DeleteTimeEntryRequestDTO,
    ListTimeEntriesRequestDTO, WeeklySummaryRequestDTO
)
from timesheet_api.domain.events.base import EventDispatcher
from timesheet_api.domain.models.base import EntityNotFoundError, ValidationError
from timesheet_api.domain.models.time_entry import TimeEntry
from timesheet_api.domain.models.timesheet import Timesheet
from timesheet_api.domain.repositories.filters import TimeEntryFilter
from timesheet_api.domain.repositories.unit_of_work import UnitOfWork
from timesheet_api.domain.services.time_aggregator import TimeAggregator, TimeSummary
from timesheet_api.domain.services.timesheet_rules import (
    ensure_can_mutate, ensure_owner_or_elevated
)


logger = logging.getLogger(__name__)


@dataclass
class WeeklySummary:
    start_date: date
    end_date: date
    summary: TimeSummary
    entries: List[TimeEntry] = field(default_factory=list)


async def _parent_of(uow: UnitOfWork, entry: TimeEntry) -> Optional[Timesheet]:
    """Load and lock the timesheet an entry is attached to, if any."""
    if entry.timesheet_id is None:
        return None
    return await uow.timesheets.find_by_id(entry.timesheet_id, for_update=True)


async def _load_entry(uow: UnitOfWork, entry_id: int, context: UseCaseContext) -> TimeEntry:
    entry = await uow.time_entries.find_by_id(entry_id)
    if entry is None:
        raise EntityNotFoundError("TimeEntry", entry_id, "Time entry not found")

    ensure_owner_or_elevated(entry.user_id, context.user_id, context.role)
    return entry


class CreateTimeEntryUseCase(CommandUseCase[CreateTimeEntryRequestDTO, TimeEntry]):
    """
    Log hours for the caller. The entry joins the timesheet covering its
    date when one exists, which must still be a draft.
    """

    def __init__(self, uow: UnitOfWork, event_dispatcher: Optional[EventDispatcher] = None):
        super().__init__(event_dispatcher)
        self.uow = uow

    async def _execute_command_logic(
        self, request: CreateTimeEntryRequestDTO, context: UseCaseContext
    ) -> TimeEntry:
        async with self.uow:
            task = await self.uow.projects.find_task(request.task_id)
            if task is None or not task.belongs_to(request.project_id):
                raise ValidationError("Invalid project or task", "task_id")

            entry = TimeEntry(
                user_id=context.user_id,
                project_id=request.project_id,
                task_id=request.task_id,
                date=request.date,
                hours=request.hours,
                is_billable=request.is_billable if request.is_billable is not None else task.is_billable,
                hourly_rate=request.hourly_rate if request.hourly_rate is not None else task.hourly_rate,
                notes=request.notes,
            )
            entry.validate()

            timesheet = await self.uow.timesheets.find_covering(context.user_id, entry.date, for_update=True)
            if timesheet is not None:
                entry.attach_to(timesheet.id)
                ensure_can_mutate(entry, timesheet, "add")

            saved = await self.uow.time_entries.save(entry)
            await self.uow.commit()

        logger.info(f"Time entry {saved.id} logged by {context.user_id}: {saved.hours}h on {saved.date}")
        return saved


class UpdateTimeEntryUseCase(CommandUseCase[UpdateTimeEntryCommandDTO, TimeEntry]):
    """Correct hours, billing or notes of an entry whose timesheet is still open."""

    def __init__(self, uow: UnitOfWork, event_dispatcher: Optional[EventDispatcher] = None):
        super().__init__(event_dispatcher)
        self.uow = uow

    async def _execute_command_logic(
        self, request: UpdateTimeEntryCommandDTO, context: UseCaseContext
    ) -> TimeEntry:
        async with self.uow:
            entry = await _load_entry(self.uow, request.entry_id, context)
            ensure_can_mutate(entry, await _parent_of(self.uow, entry), "edit")

            entry.update_details(
                hours=request.hours,
                is_billable=request.is_billable,
                hourly_rate=request.hourly_rate,
                notes=request.notes,
            )
            saved = await self.uow.time_entries.save(entry)
            await self.uow.commit()

        return saved


class DeleteTimeEntryUseCase(CommandUseCase[DeleteTimeEntryRequestDTO, bool]):
    """Remove an entry whose timesheet is still open."""

    def __init__(self, uow: UnitOfWork, event_dispatcher: Optional[EventDispatcher] = None):
        super().__init__(event_dispatcher)
        self.uow = uow

    async def _execute_command_logic(
        self, request: DeleteTimeEntryRequestDTO, context: UseCaseContext
    ) -> bool:
        async with self.uow:
            entry = await _load_entry(self.uow, request.entry_id, context)
            ensure_can_mutate(entry, await _parent_of(self.uow, entry), "delete")

            if not await self.uow.time_entries.delete(entry.id):
                raise EntityNotFoundError("TimeEntry", entry.id, "Time entry not found")
            await self.uow.commit()

        logger.info(f"Time entry {request.entry_id} deleted by {context.user_id}")
        return True


class ListTimeEntriesUseCase(QueryUseCase[ListTimeEntriesRequestDTO, List[TimeEntry]]):
    """
    List time entries, newest first. Employees only ever see their own;
    managers may name a user or leave it out to see everyone's.
    """

    def __init__(self, uow: UnitOfWork):
        super().__init__()
        self.uow = uow

    async def _execute_business_logic(
        self, request: ListTimeEntriesRequestDTO, context: UseCaseContext
    ) -> List[TimeEntry]:
        query = TimeEntryFilter(
            user_id=request.user_id if context.is_elevated else context.user_id,
            project_id=request.project_id,
            client_id=request.client_id,
            start_date=request.start_date,
            end_date=request.end_date,
        )
        async with self.uow:
            return await self.uow.time_entries.find(query)


class WeeklySummaryUseCase(QueryUseCase[WeeklySummaryRequestDTO, WeeklySummary]):
    """Aggregate the caller's entries within an inclusive date window."""

    def __init__(self, uow: UnitOfWork, aggregator: Optional[TimeAggregator] = None):
        super().__init__()
        self.uow = uow
        self.aggregator = aggregator or TimeAggregator()

    async def _validate_request(self, request: WeeklySummaryRequestDTO, context: UseCaseContext) -> None:
        if request.start_date is None or request.end_date is None:
            raise ValidationError("Start date and end date are required", "start_date")

    async def _execute_business_logic(
        self, request: WeeklySummaryRequestDTO, context: UseCaseContext
    ) -> WeeklySummary:
        query = TimeEntryFilter(
            user_id=context.user_id,
            start_date=request.start_date,
            end_date=request.end_date,
        )
        async with self.uow:
            entries = await self.uow.time_entries.find(query)

        return WeeklySummary(
            start_date=request.start_date,
            end_date=request.end_date,
            summary=self.aggregator.summarize(entries),
            entries=entries,
        )
