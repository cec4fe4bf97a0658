"""
Shared FastAPI dependencies for the routers.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import async_sessionmaker

from timesheet_api.config import Settings, get_settings
from timesheet_api.domain.repositories.unit_of_work import UnitOfWork
from timesheet_api.infrastructure.db.database import get_session_factory
from timesheet_api.infrastructure.repositories.unit_of_work import SQLAlchemyUnitOfWork


def get_unit_of_work(
    session_factory: Annotated[async_sessionmaker, Depends(get_session_factory)]
) -> UnitOfWork:
    """Dependency providing a fresh unit of work per request."""
    return SQLAlchemyUnitOfWork(session_factory)


UnitOfWorkDep = Annotated[UnitOfWork, Depends(get_unit_of_work)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
