"""
Unit tests for the timesheet workflow use cases.
"""

import pytest
from datetime import date
from decimal import Decimal

from timesheet_api.application.dto.timesheet_dto import (
    CreateTimesheetRequestDTO, TimesheetRequestDTO, RejectTimesheetRequestDTO, ListTimesheetsRequestDTO
)
from timesheet_api.application.dto.base_dto import RequestDTO
from timesheet_api.application.use_cases.base_use_case import UseCaseContext
from timesheet_api.application.use_cases.timesheet_use_cases import (
    GetOrCreateTimesheetUseCase, GetTimesheetUseCase, ListTimesheetsUseCase, SubmitTimesheetUseCase,
    ApproveTimesheetUseCase, RejectTimesheetUseCase, ReopenTimesheetUseCase, ListPendingApprovalsUseCase
)
from timesheet_api.domain.models.approval import ApprovalStatus
from timesheet_api.domain.models.timesheet import TimesheetStatus
from timesheet_api.domain.models.user import UserRole


WEEK = date(2024, 6, 3)


class TimesheetWorkflowTest:
    """Shared fixtures: an employee reporting to a manager, one billable and one internal task."""

    @pytest.fixture(autouse=True)
    def _setup(self, store, uow, dispatcher, employee, manager, billable_task, internal_task,
               employee_ctx, manager_ctx):
        self.store = store
        self.uow = uow
        self.dispatcher = dispatcher
        self.employee = employee
        self.manager = manager
        self.billable_task = billable_task
        self.internal_task = internal_task
        self.employee_ctx = employee_ctx
        self.manager_ctx = manager_ctx

    def log_standard_week(self):
        """Eight billable hours on Monday and eight internal hours on Tuesday."""
        self.store.add_entry(self.employee.id, self.billable_task, date(2024, 6, 3), "8", is_billable=True)
        self.store.add_entry(self.employee.id, self.internal_task, date(2024, 6, 4), "8", is_billable=False)

    async def open_week(self, context=None, week_start=WEEK):
        result = await GetOrCreateTimesheetUseCase(self.uow, event_dispatcher=self.dispatcher).execute(
            CreateTimesheetRequestDTO(week_start=week_start), context or self.employee_ctx
        )
        assert result.success, result.error
        return result.data

    async def submit(self, timesheet_id, context=None):
        return await SubmitTimesheetUseCase(self.uow, event_dispatcher=self.dispatcher).execute(
            TimesheetRequestDTO(timesheet_id=timesheet_id), context or self.employee_ctx
        )

    async def approve(self, timesheet_id, context=None):
        return await ApproveTimesheetUseCase(self.uow, event_dispatcher=self.dispatcher).execute(
            TimesheetRequestDTO(timesheet_id=timesheet_id), context or self.manager_ctx
        )

    async def reject(self, timesheet_id, reason, context=None):
        return await RejectTimesheetUseCase(self.uow, event_dispatcher=self.dispatcher).execute(
            RejectTimesheetRequestDTO(timesheet_id=timesheet_id, rejection_reason=reason),
            context or self.manager_ctx
        )

    async def submitted_week(self):
        self.log_standard_week()
        details = await self.open_week()
        result = await self.submit(details.timesheet.id)
        assert result.success, result.error
        return details.timesheet.id


class TestGetOrCreateTimesheet(TimesheetWorkflowTest):
    """Test cases for GetOrCreateTimesheetUseCase."""

    @pytest.mark.asyncio
    async def test_creates_draft_and_attaches_week_entries(self):
        self.log_standard_week()
        outside = self.store.add_entry(self.employee.id, self.billable_task, date(2024, 6, 10), "4")

        details = await self.open_week()

        timesheet = details.timesheet
        assert timesheet.status == TimesheetStatus.DRAFT
        assert timesheet.week_start == WEEK
        assert timesheet.week_end == date(2024, 6, 9)
        assert [entry.date for entry in details.entries] == [date(2024, 6, 3), date(2024, 6, 4)]
        assert all(entry.timesheet_id == timesheet.id for entry in details.entries)
        assert details.summary.total_hours == Decimal("16")
        assert self.store.entry(outside.id).timesheet_id is None

    @pytest.mark.asyncio
    async def test_is_idempotent(self):
        first = await self.open_week()
        second = await self.open_week()

        assert first.timesheet.id == second.timesheet.id
        assert len(self.store.state.timesheets) == 1

    @pytest.mark.asyncio
    async def test_concurrent_creation_returns_existing(self):
        existing = await self.open_week()

        class RacingUnitOfWork(type(self.uow)):
            """The first lookup misses, as if another request inserted in between."""

            async def __aenter__(self):
                await super().__aenter__()
                lookup = self.timesheets.find_by_user_and_week
                calls = []

                async def first_misses(user_id, week_start):
                    calls.append(week_start)
                    return None if len(calls) == 1 else await lookup(user_id, week_start)

                self.timesheets.find_by_user_and_week = first_misses
                return self

        result = await GetOrCreateTimesheetUseCase(RacingUnitOfWork(self.store)).execute(
            CreateTimesheetRequestDTO(week_start=WEEK), self.employee_ctx
        )

        assert result.success is True
        assert result.data.timesheet.id == existing.timesheet.id
        assert len(self.store.state.timesheets) == 1

    @pytest.mark.asyncio
    async def test_other_users_get_their_own_timesheet(self):
        other = self.store.add_user("other", manager_id=self.manager.id)

        mine = await self.open_week()
        theirs = await self.open_week(UseCaseContext(user_id=other.id))

        assert mine.timesheet.id != theirs.timesheet.id

    @pytest.mark.asyncio
    async def test_submitted_timesheet_does_not_collect_new_entries(self):
        timesheet_id = await self.submitted_week()
        late = self.store.add_entry(self.employee.id, self.billable_task, date(2024, 6, 5), "2")

        details = await self.open_week()

        assert details.timesheet.id == timesheet_id
        assert self.store.entry(late.id).timesheet_id is None


class TestSubmitTimesheet(TimesheetWorkflowTest):
    """Test cases for SubmitTimesheetUseCase."""

    @pytest.mark.asyncio
    async def test_submit_snapshots_totals_and_requests_approval(self):
        self.log_standard_week()
        details = await self.open_week()

        result = await self.submit(details.timesheet.id)

        assert result.success is True
        outcome = result.data
        assert outcome.timesheet.status == TimesheetStatus.SUBMITTED
        assert outcome.timesheet.total_hours == Decimal("16")
        assert outcome.timesheet.billable_hours == Decimal("8")
        assert outcome.timesheet.non_billable_hours == Decimal("8")
        assert outcome.timesheet.submitted_at is not None
        assert outcome.summary.billable_percentage == Decimal("50")

        assert outcome.approval.status == ApprovalStatus.PENDING
        assert outcome.approval.approver_id == self.manager.id
        assert outcome.approval.submitter_id == self.employee.id

        stored = self.store.timesheet(details.timesheet.id)
        assert stored.status == TimesheetStatus.SUBMITTED
        assert stored.total_hours == stored.billable_hours + stored.non_billable_hours
        assert len(self.store.approvals_of(details.timesheet.id)) == 1

    @pytest.mark.asyncio
    async def test_submit_empty_week(self):
        details = await self.open_week()

        result = await self.submit(details.timesheet.id)

        assert result.success is True
        assert result.data.timesheet.total_hours == 0
        assert result.data.summary.billable_percentage == 0

    @pytest.mark.asyncio
    async def test_submit_without_manager_creates_no_approval(self):
        loner = self.store.add_user("loner")
        context = UseCaseContext(user_id=loner.id)
        self.store.add_entry(loner.id, self.billable_task, WEEK, "5")
        details = await self.open_week(context)

        result = await self.submit(details.timesheet.id, context)

        assert result.success is True
        assert result.data.approval is None
        assert result.data.timesheet.status == TimesheetStatus.SUBMITTED
        assert self.store.approvals_of(details.timesheet.id) == []

    @pytest.mark.asyncio
    async def test_submit_twice_is_invalid_transition(self):
        timesheet_id = await self.submitted_week()
        before = self.store.timesheet(timesheet_id)

        result = await self.submit(timesheet_id)

        assert result.success is False
        assert result.error_code == "INVALID_TRANSITION"
        assert result.error == "Timesheet already submitted"
        after = self.store.timesheet(timesheet_id)
        assert after.total_hours == before.total_hours
        assert after.submitted_at == before.submitted_at
        assert len(self.store.approvals_of(timesheet_id)) == 1

    @pytest.mark.asyncio
    async def test_submit_unknown_timesheet(self):
        result = await self.submit(999)

        assert result.error_code == "ENTITY_NOT_FOUND"
        assert result.error == "Timesheet not found"

    @pytest.mark.asyncio
    async def test_submit_other_users_timesheet_is_forbidden(self):
        details = await self.open_week()
        intruder = self.store.add_user("intruder")

        result = await self.submit(details.timesheet.id, UseCaseContext(user_id=intruder.id))

        assert result.error_code == "FORBIDDEN"
        assert self.store.timesheet(details.timesheet.id).status == TimesheetStatus.DRAFT

    @pytest.mark.asyncio
    async def test_submit_is_atomic(self):
        self.log_standard_week()
        details = await self.open_week()
        self.store.fail_approval_add = True

        result = await self.submit(details.timesheet.id)

        assert result.success is False
        assert result.error_code == "INTERNAL_ERROR"
        assert result.error == "An unexpected error occurred"
        stored = self.store.timesheet(details.timesheet.id)
        assert stored.status == TimesheetStatus.DRAFT
        assert stored.total_hours == 0
        assert stored.submitted_at is None
        assert self.dispatcher.get_event_log() == []

    @pytest.mark.asyncio
    async def test_submit_publishes_event(self):
        timesheet_id = await self.submitted_week()

        log = self.dispatcher.get_event_log()
        assert [event["event_type"] for event in log] == ["TimesheetSubmitted"]
        assert log[0]["data"]["timesheet_id"] == timesheet_id
        assert log[0]["data"]["approver_id"] == self.manager.id


class TestApproveTimesheet(TimesheetWorkflowTest):
    """Test cases for ApproveTimesheetUseCase."""

    @pytest.mark.asyncio
    async def test_approve(self):
        timesheet_id = await self.submitted_week()

        result = await self.approve(timesheet_id)

        assert result.success is True
        assert result.data.timesheet.status == TimesheetStatus.APPROVED
        assert result.data.approval.status == ApprovalStatus.APPROVED
        assert result.data.approval.approved_at is not None
        assert result.data.approval.rejection_reason is None
        assert self.store.timesheet(timesheet_id).status == TimesheetStatus.APPROVED
        assert self.store.approvals_of(timesheet_id)[0].status == ApprovalStatus.APPROVED
        assert self.dispatcher.get_event_log()[0]["event_type"] == "TimesheetApproved"

    @pytest.mark.asyncio
    async def test_approve_by_other_manager_is_not_found(self):
        timesheet_id = await self.submitted_week()
        stranger = self.store.add_user("stranger", role=UserRole.MANAGER)

        result = await self.approve(timesheet_id, UseCaseContext(user_id=stranger.id, role=UserRole.MANAGER))

        assert result.error_code == "ENTITY_NOT_FOUND"
        assert result.error == "Approval not found or already processed"
        assert self.store.timesheet(timesheet_id).status == TimesheetStatus.SUBMITTED

    @pytest.mark.asyncio
    async def test_approve_twice_is_not_found(self):
        timesheet_id = await self.submitted_week()
        await self.approve(timesheet_id)

        result = await self.approve(timesheet_id)

        assert result.error_code == "ENTITY_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_approve_draft_is_not_found(self):
        details = await self.open_week()

        result = await self.approve(details.timesheet.id)

        assert result.error_code == "ENTITY_NOT_FOUND"
        assert self.store.timesheet(details.timesheet.id).status == TimesheetStatus.DRAFT


class TestRejectTimesheet(TimesheetWorkflowTest):
    """Test cases for RejectTimesheetUseCase."""

    @pytest.mark.asyncio
    async def test_reject_stores_reason_verbatim(self):
        timesheet_id = await self.submitted_week()

        result = await self.reject(timesheet_id, "Tuesday belongs to project X ")

        assert result.success is True
        assert result.data.timesheet.status == TimesheetStatus.REJECTED
        approval = self.store.approvals_of(timesheet_id)[0]
        assert approval.status == ApprovalStatus.REJECTED
        assert approval.rejection_reason == "Tuesday belongs to project X "
        assert approval.rejected_at is not None
        assert self.dispatcher.get_event_log()[0]["event_type"] == "TimesheetRejected"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reason", [None, "", "  "])
    async def test_reject_requires_reason(self, reason):
        timesheet_id = await self.submitted_week()

        result = await self.reject(timesheet_id, reason)

        assert result.error_code == "VALIDATION_ERROR"
        assert result.error == "Rejection reason is required"
        assert self.store.timesheet(timesheet_id).status == TimesheetStatus.SUBMITTED
        assert self.store.approvals_of(timesheet_id)[0].status == ApprovalStatus.PENDING

    @pytest.mark.asyncio
    async def test_reject_after_approve_is_not_found(self):
        timesheet_id = await self.submitted_week()
        await self.approve(timesheet_id)

        result = await self.reject(timesheet_id, "too late")

        assert result.error_code == "ENTITY_NOT_FOUND"
        assert self.store.timesheet(timesheet_id).status == TimesheetStatus.APPROVED


class TestReopenTimesheet(TimesheetWorkflowTest):
    """Test cases for ReopenTimesheetUseCase."""

    async def rejected_week(self):
        timesheet_id = await self.submitted_week()
        result = await self.reject(timesheet_id, "fix Tuesday")
        assert result.success
        return timesheet_id

    @pytest.mark.asyncio
    async def test_reopen_disabled_by_default(self):
        timesheet_id = await self.rejected_week()

        result = await ReopenTimesheetUseCase(self.uow, event_dispatcher=self.dispatcher).execute(
            TimesheetRequestDTO(timesheet_id=timesheet_id), self.employee_ctx
        )

        assert result.error_code == "INVALID_TRANSITION"
        assert self.store.timesheet(timesheet_id).status == TimesheetStatus.REJECTED

    @pytest.mark.asyncio
    async def test_reopen_when_enabled(self):
        timesheet_id = await self.rejected_week()

        result = await ReopenTimesheetUseCase(self.uow, enabled=True, event_dispatcher=self.dispatcher).execute(
            TimesheetRequestDTO(timesheet_id=timesheet_id), self.employee_ctx
        )

        assert result.success is True
        stored = self.store.timesheet(timesheet_id)
        assert stored.status == TimesheetStatus.DRAFT
        assert stored.total_hours == 0

        resubmitted = await self.submit(timesheet_id)
        assert resubmitted.success is True
        approvals = self.store.approvals_of(timesheet_id)
        assert sorted(a.status.value for a in approvals) == ["PENDING", "REJECTED"]

    @pytest.mark.asyncio
    async def test_reopen_submitted_is_invalid(self):
        timesheet_id = await self.submitted_week()

        result = await ReopenTimesheetUseCase(self.uow, enabled=True).execute(
            TimesheetRequestDTO(timesheet_id=timesheet_id), self.employee_ctx
        )

        assert result.error_code == "INVALID_TRANSITION"


class TestTimesheetQueries(TimesheetWorkflowTest):
    """Test cases for the timesheet read use cases."""

    @pytest.mark.asyncio
    async def test_get_timesheet_for_owner(self):
        timesheet_id = await self.submitted_week()

        result = await GetTimesheetUseCase(self.uow).execute(
            TimesheetRequestDTO(timesheet_id=timesheet_id), self.employee_ctx
        )

        assert result.success is True
        details = result.data
        assert details.user.id == self.employee.id
        assert len(details.entries) == 2
        assert len(details.approvals) == 1
        assert details.summary.total_hours == Decimal("16")

    @pytest.mark.asyncio
    async def test_get_timesheet_for_manager(self):
        timesheet_id = await self.submitted_week()

        result = await GetTimesheetUseCase(self.uow).execute(
            TimesheetRequestDTO(timesheet_id=timesheet_id), self.manager_ctx
        )

        assert result.success is True

    @pytest.mark.asyncio
    async def test_get_timesheet_of_colleague_is_forbidden(self):
        timesheet_id = await self.submitted_week()
        colleague = self.store.add_user("colleague", manager_id=self.manager.id)

        result = await GetTimesheetUseCase(self.uow).execute(
            TimesheetRequestDTO(timesheet_id=timesheet_id), UseCaseContext(user_id=colleague.id)
        )

        assert result.error_code == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_list_own_timesheets_newest_first(self):
        await self.open_week(week_start=date(2024, 6, 3))
        await self.open_week(week_start=date(2024, 6, 10))

        result = await ListTimesheetsUseCase(self.uow).execute(ListTimesheetsRequestDTO(), self.employee_ctx)

        assert [t.week_start for t in result.data] == [date(2024, 6, 10), date(2024, 6, 3)]

    @pytest.mark.asyncio
    async def test_list_filters_by_status(self):
        await self.submitted_week()
        await self.open_week(week_start=date(2024, 6, 10))

        result = await ListTimesheetsUseCase(self.uow).execute(
            ListTimesheetsRequestDTO(status=TimesheetStatus.DRAFT), self.employee_ctx
        )

        assert [t.week_start for t in result.data] == [date(2024, 6, 10)]

    @pytest.mark.asyncio
    async def test_employee_cannot_list_others(self):
        result = await ListTimesheetsUseCase(self.uow).execute(
            ListTimesheetsRequestDTO(user_id=self.manager.id), self.employee_ctx
        )

        assert result.error_code == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_manager_lists_report_timesheets(self):
        await self.open_week()

        result = await ListTimesheetsUseCase(self.uow).execute(
            ListTimesheetsRequestDTO(user_id=self.employee.id), self.manager_ctx
        )

        assert len(result.data) == 1

    @pytest.mark.asyncio
    async def test_pending_approvals(self):
        timesheet_id = await self.submitted_week()

        result = await ListPendingApprovalsUseCase(self.uow).execute(RequestDTO(), self.manager_ctx)

        assert result.success is True
        assert len(result.data) == 1
        pending = result.data[0]
        assert pending.timesheet.id == timesheet_id
        assert pending.submitter.id == self.employee.id
        assert len(pending.entries) == 2

    @pytest.mark.asyncio
    async def test_pending_approvals_excludes_decided(self):
        timesheet_id = await self.submitted_week()
        await self.approve(timesheet_id)

        result = await ListPendingApprovalsUseCase(self.uow).execute(RequestDTO(), self.manager_ctx)

        assert result.data == []
