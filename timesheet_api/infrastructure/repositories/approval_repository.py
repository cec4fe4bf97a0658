"""
Timesheet approval repository implementation using SQLAlchemy.
"""

from typing import List, Optional

from sqlalchemy import select, update, desc
from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_api.domain.models.approval import TimesheetApproval, ApprovalStatus
from timesheet_api.domain.repositories.approval_repository import ApprovalRepository as ApprovalRepositoryInterface
from timesheet_api.infrastructure.db.models import TimesheetApprovalModel
from timesheet_api.infrastructure.mappers.timesheet_mapper import ApprovalMapper


class SQLAlchemyApprovalRepository(ApprovalRepositoryInterface):
    """SQLAlchemy implementation of approval repository."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.mapper = ApprovalMapper()

    def _select(self):
        return select(TimesheetApprovalModel).execution_options(populate_existing=True)

    async def add(self, approval: TimesheetApproval) -> TimesheetApproval:
        model = self.mapper.domain_to_model(approval)
        self.session.add(model)
        await self.session.flush()
        approval.id = model.id
        return approval

    async def find_pending(self, timesheet_id: int, approver_id: str) -> Optional[TimesheetApproval]:
        model = await self.session.scalar(
            self._select().where(
                TimesheetApprovalModel.timesheet_id == timesheet_id,
                TimesheetApprovalModel.approver_id == approver_id,
                TimesheetApprovalModel.status == ApprovalStatus.PENDING,
            )
        )
        return self.mapper.model_to_domain(model) if model else None

    async def find_by_timesheet(self, timesheet_id: int) -> List[TimesheetApproval]:
        models = await self.session.scalars(
            self._select()
            .where(TimesheetApprovalModel.timesheet_id == timesheet_id)
            .order_by(desc(TimesheetApprovalModel.created_at), desc(TimesheetApprovalModel.id))
        )
        return [self.mapper.model_to_domain(model) for model in models]

    async def find_pending_for_approver(self, approver_id: str) -> List[TimesheetApproval]:
        models = await self.session.scalars(
            self._select()
            .where(
                TimesheetApprovalModel.approver_id == approver_id,
                TimesheetApprovalModel.status == ApprovalStatus.PENDING,
            )
            .order_by(desc(TimesheetApprovalModel.created_at), desc(TimesheetApprovalModel.id))
        )
        return [self.mapper.model_to_domain(model) for model in models]

    async def resolve(self, approval: TimesheetApproval, expected_status: ApprovalStatus) -> bool:
        result = await self.session.execute(
            update(TimesheetApprovalModel)
            .where(
                TimesheetApprovalModel.id == approval.id,
                TimesheetApprovalModel.status == expected_status,
            )
            .values(**self.mapper.decision_values(approval))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
