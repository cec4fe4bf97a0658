"""
Timesheet repository implementation using SQLAlchemy.
"""

from typing import Optional, List
from datetime import date

from sqlalchemy import select, update, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_api.domain.models.base import DuplicateEntityError
from timesheet_api.domain.models.timesheet import Timesheet, TimesheetStatus
from timesheet_api.domain.repositories.filters import TimesheetFilter
from timesheet_api.domain.repositories.timesheet_repository import TimesheetRepository as TimesheetRepositoryInterface
from timesheet_api.infrastructure.db.models import TimesheetModel
from timesheet_api.infrastructure.mappers.timesheet_mapper import TimesheetMapper


class SQLAlchemyTimesheetRepository(TimesheetRepositoryInterface):
    """SQLAlchemy implementation of timesheet repository."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.mapper = TimesheetMapper()

    def _select(self, for_update: bool = False):
        stmt = select(TimesheetModel).execution_options(populate_existing=True)
        if for_update:
            stmt = stmt.with_for_update()
        return stmt

    async def add(self, timesheet: Timesheet) -> Timesheet:
        model = self.mapper.domain_to_model(timesheet)
        try:
            # Savepoint keeps the outer transaction usable after a lost race
            async with self.session.begin_nested():
                self.session.add(model)
                await self.session.flush()
        except IntegrityError:
            raise DuplicateEntityError("Timesheet", "week_start", str(timesheet.week_start))

        timesheet.id = model.id
        return timesheet

    async def find_by_id(self, timesheet_id: int, for_update: bool = False) -> Optional[Timesheet]:
        model = await self.session.scalar(
            self._select(for_update).where(TimesheetModel.id == timesheet_id)
        )
        return self.mapper.model_to_domain(model) if model else None

    async def find_by_user_and_week(self, user_id: str, week_start: date) -> Optional[Timesheet]:
        model = await self.session.scalar(
            self._select().where(
                TimesheetModel.user_id == user_id,
                TimesheetModel.week_start == week_start,
            )
        )
        return self.mapper.model_to_domain(model) if model else None

    async def find_covering(self, user_id: str, day: date, for_update: bool = False) -> Optional[Timesheet]:
        model = await self.session.scalar(
            self._select(for_update).where(
                TimesheetModel.user_id == user_id,
                TimesheetModel.week_start <= day,
                TimesheetModel.week_end >= day,
            )
            # Overlapping weeks are possible; the latest one covering the day wins
            .order_by(desc(TimesheetModel.week_start), desc(TimesheetModel.id))
            .limit(1)
        )
        return self.mapper.model_to_domain(model) if model else None

    async def find(self, query: TimesheetFilter) -> List[Timesheet]:
        stmt = self._select()

        if query.user_id is not None:
            stmt = stmt.where(TimesheetModel.user_id == query.user_id)
        if query.status is not None:
            stmt = stmt.where(TimesheetModel.status == query.status)
        if query.start_date is not None:
            stmt = stmt.where(TimesheetModel.week_start >= query.start_date)
        if query.end_date is not None:
            stmt = stmt.where(TimesheetModel.week_start <= query.end_date)

        models = await self.session.scalars(stmt.order_by(desc(TimesheetModel.week_start)))
        return [self.mapper.model_to_domain(model) for model in models]

    async def transition(self, timesheet: Timesheet, expected_status: TimesheetStatus) -> bool:
        result = await self.session.execute(
            update(TimesheetModel)
            .where(
                TimesheetModel.id == timesheet.id,
                TimesheetModel.status == expected_status,
            )
            .values(**self.mapper.transition_values(timesheet))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
