"""
Integration fixtures: a throwaway SQLite database per test and an HTTP
client bound to the application.
"""

from dataclasses import dataclass
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from timesheet_api.domain.models.user import UserRole
from timesheet_api.infrastructure.auth.jwt_handler import JWTHandler
from timesheet_api.infrastructure.db.database import (
    create_engine, create_session_factory, create_tables, get_session_factory
)
from timesheet_api.infrastructure.db.models import UserModel, ClientModel, ProjectModel, TaskModel
from timesheet_api.infrastructure.repositories.unit_of_work import SQLAlchemyUnitOfWork


MANAGER_ID = "00000000-0000-0000-0000-00000000000a"
EMPLOYEE_ID = "00000000-0000-0000-0000-00000000000b"
LONER_ID = "00000000-0000-0000-0000-00000000000c"


@dataclass
class Seed:
    manager_id: str
    employee_id: str
    loner_id: str
    project_id: int
    client_id: int
    billable_task_id: int
    internal_task_id: int


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'timesheets.db'}")
    await create_tables(bind=engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def uow(session_factory):
    return SQLAlchemyUnitOfWork(session_factory)


@pytest_asyncio.fixture
async def seed(session_factory) -> Seed:
    async with session_factory() as session:
        session.add(UserModel(id=MANAGER_ID, email="manager@example.com", first_name="Maria",
                              last_name="Manager", role=UserRole.MANAGER))
        await session.flush()
        session.add_all([
            UserModel(id=EMPLOYEE_ID, email="employee@example.com", first_name="Emil",
                      last_name="Employee", role=UserRole.EMPLOYEE, manager_id=MANAGER_ID),
            UserModel(id=LONER_ID, email="loner@example.com", first_name="Lou",
                      last_name="Loner", role=UserRole.EMPLOYEE),
        ])

        client = ClientModel(name="Acme Corp")
        session.add(client)
        await session.flush()
        project = ProjectModel(name="Website Relaunch", code="WEB", client_id=client.id)
        session.add(project)
        await session.flush()

        billable = TaskModel(project_id=project.id, name="Development", is_billable=True,
                             hourly_rate=Decimal("95.00"))
        internal = TaskModel(project_id=project.id, name="Internal meetings", is_billable=False)
        session.add_all([billable, internal])
        await session.flush()

        seed = Seed(MANAGER_ID, EMPLOYEE_ID, LONER_ID, project.id, client.id, billable.id, internal.id)
        await session.commit()
    return seed


@pytest_asyncio.fixture
async def client(session_factory, seed):
    from timesheet_api.main import app

    app.dependency_overrides[get_session_factory] = lambda: session_factory
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


def auth_header(user_id: str, role: UserRole = UserRole.EMPLOYEE) -> dict:
    return {"Authorization": f"Bearer {JWTHandler().generate_token(user_id, role)}"}


@pytest.fixture
def employee_headers():
    return auth_header(EMPLOYEE_ID)


@pytest.fixture
def manager_headers():
    return auth_header(MANAGER_ID, UserRole.MANAGER)


@pytest.fixture
def loner_headers():
    return auth_header(LONER_ID)
