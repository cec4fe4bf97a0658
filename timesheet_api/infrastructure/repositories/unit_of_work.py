"""
SQLAlchemy unit of work.
One AsyncSession, and therefore one transaction, per ``async with`` block.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from timesheet_api.domain.repositories.unit_of_work import UnitOfWork
from timesheet_api.infrastructure.db.database import SessionLocal
from .user_repository import SQLAlchemyUserRepository
from .project_repository import SQLAlchemyProjectRepository
from .time_entry_repository import SQLAlchemyTimeEntryRepository
from .timesheet_repository import SQLAlchemyTimesheetRepository
from .approval_repository import SQLAlchemyApprovalRepository


class SQLAlchemyUnitOfWork(UnitOfWork):
    """Unit of work backed by an AsyncSession from ``session_factory``."""

    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self.session = self.session_factory()
        self.users = SQLAlchemyUserRepository(self.session)
        self.projects = SQLAlchemyProjectRepository(self.session)
        self.time_entries = SQLAlchemyTimeEntryRepository(self.session)
        self.timesheets = SQLAlchemyTimesheetRepository(self.session)
        self.approvals = SQLAlchemyApprovalRepository(self.session)
        return await super().__aenter__()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await super().__aexit__(exc_type, exc, tb)
        finally:
            await self.session.close()
            self.session = None

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
