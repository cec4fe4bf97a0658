"""
Timesheet use cases for the application layer.
Implements the weekly timesheet lifecycle: open, submit, approve, reject.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from timesheet_api.application.use_cases.base_use_case import (
    CommandUseCase, QueryUseCase, UseCaseContext
)
from timesheet_api.application.dto.base_dto import RequestDTO
from timesheet_api.application.dto.timesheet_dto import (
    CreateTimesheetRequestDTO, TimesheetRequestDTO, RejectTimesheetRequestDTO,
    ListTimesheetsRequestDTO
)
from timesheet_api.domain.events.base import EventDispatcher
from timesheet_api.domain.models.approval import (
    TimesheetApproval, ApprovalStatus, normalize_reason
)
from timesheet_api.domain.models.base import (
    EntityNotFoundError, DuplicateEntityError, InvalidTransitionError, ForbiddenError
)
from timesheet_api.domain.models.time_entry import TimeEntry
from timesheet_api.domain.models.timesheet import Timesheet, TimesheetStatus
from timesheet_api.domain.models.user import User
from timesheet_api.domain.repositories.filters import TimesheetFilter
from timesheet_api.domain.repositories.unit_of_work import UnitOfWork
from timesheet_api.domain.services.time_aggregator import TimeAggregator, TimeSummary
from timesheet_api.domain.services.timesheet_rules import ensure_owner_or_elevated


logger = logging.getLogger(__name__)

APPROVAL_NOT_FOUND = "Approval not found or already processed"


@dataclass
class TimesheetDetails:
    """A timesheet with everything shown alongside it."""

    timesheet: Timesheet
    entries: List[TimeEntry] = field(default_factory=list)
    approvals: List[TimesheetApproval] = field(default_factory=list)
    summary: Optional[TimeSummary] = None
    user: Optional[User] = None


@dataclass
class SubmissionOutcome:
    timesheet: Timesheet
    summary: TimeSummary
    approval: Optional[TimesheetApproval] = None


@dataclass
class DecisionOutcome:
    timesheet: Timesheet
    approval: TimesheetApproval


@dataclass
class PendingApproval:
    approval: TimesheetApproval
    timesheet: Timesheet
    submitter: Optional[User] = None
    entries: List[TimeEntry] = field(default_factory=list)


def _not_found(timesheet_id: int) -> EntityNotFoundError:
    return EntityNotFoundError("Timesheet", timesheet_id, "Timesheet not found")


async def _load_details(
    uow: UnitOfWork,
    timesheet: Timesheet,
    aggregator: TimeAggregator,
    include_user: bool = False
) -> TimesheetDetails:
    entries = await uow.time_entries.find_by_timesheet(timesheet.id)
    approvals = await uow.approvals.find_by_timesheet(timesheet.id)
    user = await uow.users.find_by_id(timesheet.user_id) if include_user else None
    return TimesheetDetails(
        timesheet=timesheet,
        entries=entries,
        approvals=approvals,
        summary=aggregator.summarize(entries),
        user=user,
    )


class GetOrCreateTimesheetUseCase(CommandUseCase[CreateTimesheetRequestDTO, TimesheetDetails]):
    """
    Return the caller's timesheet for a week, creating it when absent.
    A draft timesheet picks up the caller's unattached entries of that week.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        aggregator: Optional[TimeAggregator] = None,
        event_dispatcher: Optional[EventDispatcher] = None
    ):
        super().__init__(event_dispatcher)
        self.uow = uow
        self.aggregator = aggregator or TimeAggregator()

    async def _execute_command_logic(
        self, request: CreateTimesheetRequestDTO, context: UseCaseContext
    ) -> TimesheetDetails:
        async with self.uow:
            timesheet = await self.uow.timesheets.find_by_user_and_week(
                context.user_id, request.week_start
            )

            if timesheet is None:
                try:
                    timesheet = await self.uow.timesheets.add(
                        Timesheet.open_week(context.user_id, request.week_start)
                    )
                    logger.info(f"Opened timesheet {timesheet.id} for user {context.user_id} week {timesheet.week}")
                except DuplicateEntityError:
                    # A concurrent request created it first
                    timesheet = await self.uow.timesheets.find_by_user_and_week(
                        context.user_id, request.week_start
                    )
                    if timesheet is None:
                        raise

            if timesheet.is_draft:
                attached = await self.uow.time_entries.attach_unassigned(
                    context.user_id, timesheet.week_start, timesheet.week_end, timesheet.id
                )
                if attached:
                    logger.debug(f"Attached {attached} entries to timesheet {timesheet.id}")

            details = await _load_details(self.uow, timesheet, self.aggregator)
            await self.uow.commit()

        return details


class GetTimesheetUseCase(QueryUseCase[TimesheetRequestDTO, TimesheetDetails]):
    """Fetch one timesheet with its owner, entries, approvals and live totals."""

    def __init__(self, uow: UnitOfWork, aggregator: Optional[TimeAggregator] = None):
        super().__init__()
        self.uow = uow
        self.aggregator = aggregator or TimeAggregator()

    async def _execute_business_logic(
        self, request: TimesheetRequestDTO, context: UseCaseContext
    ) -> TimesheetDetails:
        async with self.uow:
            timesheet = await self.uow.timesheets.find_by_id(request.timesheet_id)
            if timesheet is None:
                raise _not_found(request.timesheet_id)

            ensure_owner_or_elevated(timesheet.user_id, context.user_id, context.role)

            return await _load_details(self.uow, timesheet, self.aggregator, include_user=True)


class ListTimesheetsUseCase(QueryUseCase[ListTimesheetsRequestDTO, List[Timesheet]]):
    """List timesheets of the caller, or of another user for managers."""

    def __init__(self, uow: UnitOfWork):
        super().__init__()
        self.uow = uow

    async def _execute_business_logic(
        self, request: ListTimesheetsRequestDTO, context: UseCaseContext
    ) -> List[Timesheet]:
        user_id = request.user_id or context.user_id
        if user_id != context.user_id and not context.is_elevated:
            raise ForbiddenError("Forbidden")

        query = TimesheetFilter(
            user_id=user_id,
            status=TimesheetStatus(request.status) if request.status else None,
            start_date=request.start_date,
            end_date=request.end_date,
        )
        async with self.uow:
            return await self.uow.timesheets.find(query)


class SubmitTimesheetUseCase(CommandUseCase[TimesheetRequestDTO, SubmissionOutcome]):
    """
    Submit a draft timesheet for approval.

    Totals are recomputed from the attached entries, the status moves to
    SUBMITTED and an approval is addressed to the owner's manager, all in
    one transaction. Owners without a manager still submit; no approval
    is created for them.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        aggregator: Optional[TimeAggregator] = None,
        event_dispatcher: Optional[EventDispatcher] = None
    ):
        super().__init__(event_dispatcher)
        self.uow = uow
        self.aggregator = aggregator or TimeAggregator()

    async def _execute_command_logic(
        self, request: TimesheetRequestDTO, context: UseCaseContext
    ) -> SubmissionOutcome:
        async with self.uow:
            # Row lock keeps entry mutations out while totals are computed
            timesheet = await self.uow.timesheets.find_by_id(request.timesheet_id, for_update=True)
            if timesheet is None:
                raise _not_found(request.timesheet_id)

            ensure_owner_or_elevated(timesheet.user_id, context.user_id, context.role)

            if not timesheet.is_draft:
                raise InvalidTransitionError(
                    "Timesheet already submitted", current_status=timesheet.status.value
                )

            entries = await self.uow.time_entries.find_by_timesheet(timesheet.id)
            summary = self.aggregator.summarize(entries)
            manager_id = await self.uow.users.find_manager_id(timesheet.user_id)

            timesheet.submit(
                summary.billable_hours,
                summary.non_billable_hours,
                approver_id=manager_id,
                submitted_at=datetime.utcnow(),
            )
            if not await self.uow.timesheets.transition(timesheet, TimesheetStatus.DRAFT):
                raise InvalidTransitionError("Timesheet already submitted")

            approval = None
            if manager_id:
                approval = await self.uow.approvals.add(
                    TimesheetApproval.request(timesheet.id, manager_id, timesheet.user_id)
                )
            else:
                logger.warning(
                    f"User {timesheet.user_id} has no manager; "
                    f"timesheet {timesheet.id} submitted without an approval"
                )

            await self.uow.commit()

        logger.info(
            f"Timesheet {timesheet.id} submitted by {context.user_id}: "
            f"{summary.total_hours}h total, {summary.billable_hours}h billable"
        )
        self.collect_events(timesheet)
        return SubmissionOutcome(timesheet=timesheet, summary=summary, approval=approval)


class _DecideTimesheetUseCase(CommandUseCase[TimesheetRequestDTO, DecisionOutcome]):
    """Shared flow of approve and reject: resolve the caller's pending approval."""

    def __init__(self, uow: UnitOfWork, event_dispatcher: Optional[EventDispatcher] = None):
        super().__init__(event_dispatcher)
        self.uow = uow

    def _decide(
        self,
        approval: TimesheetApproval,
        timesheet: Timesheet,
        request: TimesheetRequestDTO,
        context: UseCaseContext
    ) -> None:
        raise NotImplementedError

    async def _execute_command_logic(
        self, request: TimesheetRequestDTO, context: UseCaseContext
    ) -> DecisionOutcome:
        async with self.uow:
            approval = await self.uow.approvals.find_pending(request.timesheet_id, context.user_id)
            if approval is None:
                raise EntityNotFoundError("TimesheetApproval", request.timesheet_id, APPROVAL_NOT_FOUND)

            timesheet = await self.uow.timesheets.find_by_id(request.timesheet_id, for_update=True)
            if timesheet is None:
                raise _not_found(request.timesheet_id)

            self._decide(approval, timesheet, request, context)

            if not await self.uow.approvals.resolve(approval, ApprovalStatus.PENDING):
                raise EntityNotFoundError("TimesheetApproval", request.timesheet_id, APPROVAL_NOT_FOUND)
            if not await self.uow.timesheets.transition(timesheet, TimesheetStatus.SUBMITTED):
                raise InvalidTransitionError("Timesheet is no longer awaiting approval")

            await self.uow.commit()

        logger.info(f"Timesheet {timesheet.id} {timesheet.status.value.lower()} by {context.user_id}")
        self.collect_events(timesheet)
        return DecisionOutcome(timesheet=timesheet, approval=approval)


class ApproveTimesheetUseCase(_DecideTimesheetUseCase):
    """Approve a submitted timesheet addressed to the caller."""

    def _decide(self, approval, timesheet, request, context) -> None:
        now = datetime.utcnow()
        timesheet.approve(context.user_id)
        approval.approve(now)


class RejectTimesheetUseCase(_DecideTimesheetUseCase):
    """Reject a submitted timesheet addressed to the caller, with a reason."""

    async def _validate_request(self, request: RejectTimesheetRequestDTO, context: UseCaseContext) -> None:
        normalize_reason(request.rejection_reason)

    def _decide(self, approval, timesheet, request: RejectTimesheetRequestDTO, context) -> None:
        now = datetime.utcnow()
        timesheet.reject(context.user_id, request.rejection_reason)
        approval.reject(request.rejection_reason, now)


class ReopenTimesheetUseCase(CommandUseCase[TimesheetRequestDTO, Timesheet]):
    """
    Return a rejected timesheet to draft. Disabled unless the deployment
    opts in; without it a rejected timesheet is final.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        enabled: bool = False,
        event_dispatcher: Optional[EventDispatcher] = None
    ):
        super().__init__(event_dispatcher)
        self.uow = uow
        self.enabled = enabled

    async def _execute_command_logic(
        self, request: TimesheetRequestDTO, context: UseCaseContext
    ) -> Timesheet:
        async with self.uow:
            timesheet = await self.uow.timesheets.find_by_id(request.timesheet_id, for_update=True)
            if timesheet is None:
                raise _not_found(request.timesheet_id)

            ensure_owner_or_elevated(timesheet.user_id, context.user_id, context.role)

            if not self.enabled:
                raise InvalidTransitionError(
                    "Reopening rejected timesheets is disabled",
                    current_status=timesheet.status.value,
                )

            timesheet.reopen()
            if not await self.uow.timesheets.transition(timesheet, TimesheetStatus.REJECTED):
                raise InvalidTransitionError("Timesheet is no longer rejected")

            await self.uow.commit()

        self.collect_events(timesheet)
        return timesheet


class ListPendingApprovalsUseCase(QueryUseCase[RequestDTO, List[PendingApproval]]):
    """Pending approvals addressed to the caller, newest first."""

    def __init__(self, uow: UnitOfWork):
        super().__init__()
        self.uow = uow

    async def _execute_business_logic(
        self, request: RequestDTO, context: UseCaseContext
    ) -> List[PendingApproval]:
        async with self.uow:
            approvals = await self.uow.approvals.find_pending_for_approver(context.user_id)
            if not approvals:
                return []

            submitters = {
                user.id: user
                for user in await self.uow.users.find_by_ids(
                    list({approval.submitter_id for approval in approvals})
                )
            }

            pending = []
            for approval in approvals:
                timesheet = await self.uow.timesheets.find_by_id(approval.timesheet_id)
                if timesheet is None:
                    logger.warning(f"Approval {approval.id} references missing timesheet {approval.timesheet_id}")
                    continue
                pending.append(PendingApproval(
                    approval=approval,
                    timesheet=timesheet,
                    submitter=submitters.get(approval.submitter_id),
                    entries=await self.uow.time_entries.find_by_timesheet(timesheet.id),
                ))
            return pending
