"""Timesheet repository interface.
Defines the contract for timesheet persistence, including the
compare-and-set status transition the workflow relies on.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from timesheet_api.domain.models.timesheet import Timesheet, TimesheetStatus
from timesheet_api.domain.repositories.filters import TimesheetFilter


class TimesheetRepository(ABC):
    """Repository interface for the Timesheet aggregate."""

    @abstractmethod
    async def add(self, timesheet: Timesheet) -> Timesheet:
        """
        Insert a new timesheet.
        Raises DuplicateEntityError when the store already holds a timesheet
        for the same (user_id, week_start).
        """
        pass

    @abstractmethod
    async def find_by_id(self, timesheet_id: int, for_update: bool = False) -> Optional[Timesheet]:
        """
        Find a timesheet by ID. With ``for_update`` the row stays locked
        until the surrounding transaction ends, where the store supports it.
        """
        pass

    @abstractmethod
    async def find_by_user_and_week(self, user_id: str, week_start: date) -> Optional[Timesheet]:
        pass

    @abstractmethod
    async def find_covering(self, user_id: str, day: date, for_update: bool = False) -> Optional[Timesheet]:
        """
        Find the user's timesheet whose week contains ``day``.
        When weeks overlap, the one starting latest is returned.
        """
        pass

    @abstractmethod
    async def find(self, query: TimesheetFilter) -> List[Timesheet]:
        """Find timesheets matching ``query``, newest week first."""
        pass

    @abstractmethod
    async def transition(self, timesheet: Timesheet, expected_status: TimesheetStatus) -> bool:
        """
        Persist status, totals and ``submitted_at`` of ``timesheet`` only if
        the stored row is still in ``expected_status``.
        Returns False when another writer changed the status first.
        """
        pass
