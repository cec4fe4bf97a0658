"""Timesheet approval repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from timesheet_api.domain.models.approval import TimesheetApproval, ApprovalStatus


class ApprovalRepository(ABC):
    """Repository interface for TimesheetApproval records."""

    @abstractmethod
    async def add(self, approval: TimesheetApproval) -> TimesheetApproval:
        pass

    @abstractmethod
    async def find_pending(self, timesheet_id: int, approver_id: str) -> Optional[TimesheetApproval]:
        """
        Find the pending approval of ``timesheet_id`` addressed to
        ``approver_id``. None when absent or already processed.
        """
        pass

    @abstractmethod
    async def find_by_timesheet(self, timesheet_id: int) -> List[TimesheetApproval]:
        """All approvals of a timesheet, newest first."""
        pass

    @abstractmethod
    async def find_pending_for_approver(self, approver_id: str) -> List[TimesheetApproval]:
        """Pending approvals addressed to ``approver_id``, newest first."""
        pass

    @abstractmethod
    async def resolve(self, approval: TimesheetApproval, expected_status: ApprovalStatus) -> bool:
        """
        Persist the decision recorded on ``approval`` only if the stored row
        is still in ``expected_status``. Returns False on a lost race.
        """
        pass
