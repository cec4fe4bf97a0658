"""
Unit tests for the Timesheet and TimesheetApproval domain models.
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from timesheet_api.domain.models.approval import TimesheetApproval, ApprovalStatus, normalize_reason
from timesheet_api.domain.models.base import ValidationError, InvalidTransitionError, WeekRange
from timesheet_api.domain.models.timesheet import Timesheet, TimesheetStatus


class TestWeekRange:
    """Test cases for the WeekRange value object."""

    def test_end_is_six_days_later(self):
        week = WeekRange(date(2024, 6, 3))

        assert week.end == date(2024, 6, 9)

    def test_contains_is_inclusive(self):
        week = WeekRange(date(2024, 6, 3))

        assert week.contains(date(2024, 6, 3))
        assert week.contains(date(2024, 6, 9))
        assert not week.contains(date(2024, 6, 10))
        assert not week.contains(date(2024, 6, 2))

    def test_rejects_non_date(self):
        with pytest.raises(ValidationError):
            WeekRange("2024-06-03")


class TestTimesheet:
    """Test cases for the Timesheet aggregate."""

    def setup_method(self):
        self.timesheet = Timesheet.open_week("u1", date(2024, 6, 3))
        self.timesheet.id = 1

    def test_open_week(self):
        assert self.timesheet.status == TimesheetStatus.DRAFT
        assert self.timesheet.week_end == date(2024, 6, 9)
        assert self.timesheet.total_hours == 0
        assert self.timesheet.submitted_at is None

    def test_week_start_need_not_be_monday(self):
        timesheet = Timesheet.open_week("u1", date(2024, 6, 5))

        assert timesheet.week_end == date(2024, 6, 11)

    def test_open_week_requires_user(self):
        with pytest.raises(ValidationError, match="User ID is required"):
            Timesheet.open_week("", date(2024, 6, 3))

    def test_submit_snapshots_totals(self):
        at = datetime(2024, 6, 10, 9, 0)
        self.timesheet.submit(Decimal("8"), Decimal("8"), approver_id="m1", submitted_at=at)

        assert self.timesheet.status == TimesheetStatus.SUBMITTED
        assert self.timesheet.total_hours == Decimal("16")
        assert self.timesheet.billable_hours == Decimal("8")
        assert self.timesheet.non_billable_hours == Decimal("8")
        assert self.timesheet.submitted_at == at

        events = self.timesheet.pull_events()
        assert [event.event_type for event in events] == ["TimesheetSubmitted"]
        assert events[0].approver_id == "m1"

    def test_submit_twice_fails(self):
        self.timesheet.submit(Decimal("1"), Decimal("0"))

        with pytest.raises(InvalidTransitionError) as exc:
            self.timesheet.submit(Decimal("2"), Decimal("0"))

        assert exc.value.code == "INVALID_TRANSITION"
        assert self.timesheet.total_hours == Decimal("1")

    def test_approve_and_reject_require_submitted(self):
        with pytest.raises(InvalidTransitionError):
            self.timesheet.approve("m1")
        with pytest.raises(InvalidTransitionError):
            self.timesheet.reject("m1", "wrong project")

    def test_approve(self):
        self.timesheet.submit(Decimal("8"), Decimal("0"))
        self.timesheet.pull_events()

        self.timesheet.approve("m1")

        assert self.timesheet.status == TimesheetStatus.APPROVED
        assert [e.event_type for e in self.timesheet.pull_events()] == ["TimesheetApproved"]

    def test_approved_is_terminal(self):
        self.timesheet.submit(Decimal("8"), Decimal("0"))
        self.timesheet.approve("m1")

        with pytest.raises(InvalidTransitionError):
            self.timesheet.reject("m1", "late")
        with pytest.raises(InvalidTransitionError):
            self.timesheet.reopen()

    def test_reopen_rejected(self):
        self.timesheet.submit(Decimal("8"), Decimal("2"))
        self.timesheet.reject("m1", "missing notes")

        self.timesheet.reopen()

        assert self.timesheet.status == TimesheetStatus.DRAFT
        assert self.timesheet.total_hours == 0
        assert self.timesheet.submitted_at is None

    def test_validate_rejects_inconsistent_totals(self):
        self.timesheet.total_hours = Decimal("5")

        with pytest.raises(ValidationError, match="Total hours"):
            self.timesheet.validate()


class TestTimesheetApproval:
    """Test cases for TimesheetApproval."""

    def setup_method(self):
        self.approval = TimesheetApproval.request(timesheet_id=1, approver_id="m1", submitter_id="u1")

    def test_request_is_pending(self):
        assert self.approval.status == ApprovalStatus.PENDING
        assert self.approval.rejection_reason is None
        assert self.approval.is_pending

    def test_approve_sets_timestamp(self):
        at = datetime(2024, 6, 11, 8, 0)
        self.approval.approve(at)

        assert self.approval.status == ApprovalStatus.APPROVED
        assert self.approval.approved_at == at
        assert self.approval.rejection_reason is None
        self.approval.validate()

    def test_reject_keeps_reason_verbatim(self):
        self.approval.reject("  Hours on Friday look wrong ")

        assert self.approval.status == ApprovalStatus.REJECTED
        assert self.approval.rejection_reason == "  Hours on Friday look wrong "
        assert self.approval.rejected_at is not None
        self.approval.validate()

    @pytest.mark.parametrize("reason", [None, "", "   "])
    def test_reject_requires_reason(self, reason):
        with pytest.raises(ValidationError, match="Rejection reason is required"):
            self.approval.reject(reason)

        assert self.approval.is_pending

    def test_cannot_decide_twice(self):
        self.approval.approve()

        with pytest.raises(InvalidTransitionError, match="Approval already approved"):
            self.approval.reject("changed my mind")

    def test_normalize_reason_returns_input(self):
        assert normalize_reason("ok") == "ok"
