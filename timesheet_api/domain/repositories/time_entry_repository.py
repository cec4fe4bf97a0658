"""Time Entry repository interface.
Defines the contract for time entry data persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from timesheet_api.domain.models.time_entry import TimeEntry
from timesheet_api.domain.repositories.filters import TimeEntryFilter


class TimeEntryRepository(ABC):
    """
    Repository interface for TimeEntry entity.
    Returned entries carry their project, client and task display names.
    """

    @abstractmethod
    async def save(self, time_entry: TimeEntry) -> TimeEntry:
        """
        Insert a new entry or update an existing one.
        Returns the stored entry with its ID and display names.
        """
        pass

    @abstractmethod
    async def find_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        """
        Find a time entry by its ID.
        Returns None if not found.
        """
        pass

    @abstractmethod
    async def delete(self, entry_id: int) -> bool:
        """Delete an entry. Returns False when it did not exist."""
        pass

    @abstractmethod
    async def find(self, query: TimeEntryFilter) -> List[TimeEntry]:
        """
        Find entries matching ``query``, newest date first.
        """
        pass

    @abstractmethod
    async def find_by_timesheet(self, timesheet_id: int) -> List[TimeEntry]:
        """
        Find all entries attached to a timesheet, oldest date first.
        """
        pass

    @abstractmethod
    async def attach_unassigned(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
        timesheet_id: int
    ) -> int:
        """
        Attach the user's unattached entries dated within the range to
        ``timesheet_id``. Returns the number of entries attached.
        """
        pass
