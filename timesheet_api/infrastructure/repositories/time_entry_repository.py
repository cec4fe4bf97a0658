"""
Time entry repository implementation using SQLAlchemy.
"""

from typing import Optional, List
from datetime import date

from sqlalchemy import select, update, delete, desc, asc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from timesheet_api.domain.models.base import EntityNotFoundError
from timesheet_api.domain.models.time_entry import TimeEntry
from timesheet_api.domain.repositories.filters import TimeEntryFilter
from timesheet_api.domain.repositories.time_entry_repository import TimeEntryRepository as TimeEntryRepositoryInterface
from timesheet_api.infrastructure.db.models import TimeEntryModel, ProjectModel
from timesheet_api.infrastructure.mappers.time_entry_mapper import TimeEntryMapper


class SQLAlchemyTimeEntryRepository(TimeEntryRepositoryInterface):
    """SQLAlchemy implementation of time entry repository."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.mapper = TimeEntryMapper()
        self.model = TimeEntryModel

    def _select(self):
        # Display names come along in the same round trip
        return (
            select(TimeEntryModel)
            .options(
                joinedload(TimeEntryModel.project).joinedload(ProjectModel.client),
                joinedload(TimeEntryModel.task),
            )
            .execution_options(populate_existing=True)
        )

    async def save(self, time_entry: TimeEntry) -> TimeEntry:
        """Save a time entry entity."""
        if time_entry.is_new:
            model = self.mapper.domain_to_model(time_entry)
            self.session.add(model)
        else:
            model = await self.session.get(TimeEntryModel, time_entry.id)
            if not model:
                raise EntityNotFoundError("TimeEntry", time_entry.id)
            self.mapper.update_model(model, time_entry)

        await self.session.flush()
        return await self.find_by_id(model.id)

    async def find_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        model = await self.session.scalar(self._select().where(TimeEntryModel.id == entry_id))
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    async def delete(self, entry_id: int) -> bool:
        result = await self.session.execute(
            delete(TimeEntryModel).where(TimeEntryModel.id == entry_id)
        )
        return result.rowcount > 0

    async def find(self, query: TimeEntryFilter) -> List[TimeEntry]:
        stmt = self._select()

        if query.user_id is not None:
            stmt = stmt.where(TimeEntryModel.user_id == query.user_id)
        if query.project_id is not None:
            stmt = stmt.where(TimeEntryModel.project_id == query.project_id)
        if query.client_id is not None:
            stmt = stmt.where(
                TimeEntryModel.project_id.in_(
                    select(ProjectModel.id).where(ProjectModel.client_id == query.client_id)
                )
            )
        if query.start_date is not None:
            stmt = stmt.where(TimeEntryModel.date >= query.start_date)
        if query.end_date is not None:
            stmt = stmt.where(TimeEntryModel.date <= query.end_date)
        if query.timesheet_id is not None:
            stmt = stmt.where(TimeEntryModel.timesheet_id == query.timesheet_id)
        if query.unattached_only:
            stmt = stmt.where(TimeEntryModel.timesheet_id.is_(None))

        stmt = stmt.order_by(desc(TimeEntryModel.date), desc(TimeEntryModel.id))
        models = await self.session.scalars(stmt)
        return [self.mapper.model_to_domain(model) for model in models.unique()]

    async def find_by_timesheet(self, timesheet_id: int) -> List[TimeEntry]:
        stmt = (
            self._select()
            .where(TimeEntryModel.timesheet_id == timesheet_id)
            .order_by(asc(TimeEntryModel.date), asc(TimeEntryModel.id))
        )
        models = await self.session.scalars(stmt)
        return [self.mapper.model_to_domain(model) for model in models.unique()]

    async def attach_unassigned(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
        timesheet_id: int
    ) -> int:
        result = await self.session.execute(
            update(TimeEntryModel)
            .where(
                TimeEntryModel.user_id == user_id,
                TimeEntryModel.timesheet_id.is_(None),
                TimeEntryModel.date >= start_date,
                TimeEntryModel.date <= end_date,
            )
            .values(timesheet_id=timesheet_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
