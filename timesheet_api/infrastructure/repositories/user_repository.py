"""
User repository implementation using SQLAlchemy.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timesheet_api.domain.models.user import User
from timesheet_api.domain.repositories.user_repository import UserRepository as UserRepositoryInterface
from timesheet_api.infrastructure.db.models import UserModel
from timesheet_api.infrastructure.mappers.user_mapper import UserMapper


class SQLAlchemyUserRepository(UserRepositoryInterface):
    """SQLAlchemy implementation of user repository."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.mapper = UserMapper()

    async def find_by_id(self, user_id: str) -> Optional[User]:
        model = await self.session.get(UserModel, user_id)
        return self.mapper.model_to_domain(model) if model else None

    async def find_by_ids(self, user_ids: List[str]) -> List[User]:
        if not user_ids:
            return []
        result = await self.session.scalars(select(UserModel).where(UserModel.id.in_(user_ids)))
        return [self.mapper.model_to_domain(model) for model in result]

    async def find_manager_id(self, user_id: str) -> Optional[str]:
        return await self.session.scalar(
            select(UserModel.manager_id).where(UserModel.id == user_id)
        )
