"""
Unit of work interface.
Groups the repositories over one transaction so multi-record workflow
steps either all persist or none do.
"""

from abc import ABC, abstractmethod

from .user_repository import UserRepository
from .project_repository import ProjectRepository
from .time_entry_repository import TimeEntryRepository
from .timesheet_repository import TimesheetRepository
from .approval_repository import ApprovalRepository


class UnitOfWork(ABC):
    """
    Usage::

        async with uow:
            ...
            await uow.commit()

    Leaving the block without ``commit()``, or through an exception,
    rolls back every write made inside it.
    """

    users: UserRepository
    projects: ProjectRepository
    time_entries: TimeEntryRepository
    timesheets: TimesheetRepository
    approvals: ApprovalRepository

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.rollback()

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass
