"""
In-memory fakes of the repository interfaces and the unit of work.

The fake store behaves like a transactional database: a unit of work
operates on a private copy that only replaces the shared state on commit.
"""

import copy
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

import pytest

from timesheet_api.application.use_cases.base_use_case import UseCaseContext
from timesheet_api.domain.events.base import EventDispatcher
from timesheet_api.domain.models.approval import TimesheetApproval, ApprovalStatus
from timesheet_api.domain.models.base import DuplicateEntityError
from timesheet_api.domain.models.project import Project, Task
from timesheet_api.domain.models.time_entry import TimeEntry
from timesheet_api.domain.models.timesheet import Timesheet, TimesheetStatus
from timesheet_api.domain.models.user import User, UserRole
from timesheet_api.domain.repositories import (
    UserRepository, ProjectRepository, TimeEntryRepository, TimesheetRepository,
    ApprovalRepository, UnitOfWork, TimeEntryFilter, TimesheetFilter
)


class StoreState:
    """Tables of the fake database."""

    def __init__(self):
        self.users: Dict[str, User] = {}
        self.projects: Dict[int, Project] = {}
        self.tasks: Dict[int, Task] = {}
        self.time_entries: Dict[int, TimeEntry] = {}
        self.timesheets: Dict[int, Timesheet] = {}
        self.approvals: Dict[int, TimesheetApproval] = {}
        self.next_id = 1

    def new_id(self) -> int:
        value = self.next_id
        self.next_id += 1
        return value


class FakeStore:
    """Shared state plus seeding helpers."""

    def __init__(self):
        self.state = StoreState()
        self.fail_approval_add = False
        self.commits = 0

    def add_user(self, user_id: str, role: UserRole = UserRole.EMPLOYEE, manager_id: Optional[str] = None) -> User:
        user = User(
            id=user_id,
            email=f"{user_id}@example.com",
            first_name=user_id.capitalize(),
            last_name="Tester",
            role=role,
            manager_id=manager_id,
        )
        self.state.users[user_id] = user
        return user

    def add_project(self, name: str = "Website", client_name: Optional[str] = "Acme") -> Project:
        project = Project(id=self.state.new_id(), name=name, client_id=1 if client_name else None,
                          client_name=client_name)
        self.state.projects[project.id] = project
        return project

    def add_task(self, project: Project, name: str = "Development", is_billable: bool = True,
                 hourly_rate: Optional[Decimal] = Decimal("100")) -> Task:
        task = Task(id=self.state.new_id(), project_id=project.id, name=name,
                    is_billable=is_billable, hourly_rate=hourly_rate)
        self.state.tasks[task.id] = task
        return task

    def add_entry(self, user_id: str, task: Task, day: date, hours: str,
                  is_billable: bool = True, timesheet_id: Optional[int] = None) -> TimeEntry:
        entry = TimeEntry(
            id=self.state.new_id(), user_id=user_id, project_id=task.project_id, task_id=task.id,
            date=day, hours=Decimal(hours), is_billable=is_billable, timesheet_id=timesheet_id,
        )
        self.state.time_entries[entry.id] = entry
        return entry

    def timesheet(self, timesheet_id: int) -> Timesheet:
        return self.state.timesheets[timesheet_id]

    def entry(self, entry_id: int) -> Optional[TimeEntry]:
        return self.state.time_entries.get(entry_id)

    def approvals_of(self, timesheet_id: int) -> List[TimesheetApproval]:
        return [a for a in self.state.approvals.values() if a.timesheet_id == timesheet_id]


def _copy(entity):
    return copy.deepcopy(entity)


class FakeUserRepository(UserRepository):
    def __init__(self, state: StoreState):
        self.state = state

    async def find_by_id(self, user_id):
        return _copy(self.state.users.get(user_id))

    async def find_by_ids(self, user_ids):
        return [_copy(self.state.users[uid]) for uid in user_ids if uid in self.state.users]

    async def find_manager_id(self, user_id):
        user = self.state.users.get(user_id)
        return user.manager_id if user else None


class FakeProjectRepository(ProjectRepository):
    def __init__(self, state: StoreState):
        self.state = state

    async def find_by_id(self, project_id):
        return _copy(self.state.projects.get(project_id))

    async def find_task(self, task_id):
        return _copy(self.state.tasks.get(task_id))


class FakeTimeEntryRepository(TimeEntryRepository):
    def __init__(self, state: StoreState):
        self.state = state

    def _decorate(self, entry: TimeEntry) -> TimeEntry:
        entry = _copy(entry)
        project = self.state.projects.get(entry.project_id)
        task = self.state.tasks.get(entry.task_id)
        entry.project_name = project.name if project else None
        entry.client_name = project.client_name if project else None
        entry.task_name = task.name if task else None
        return entry

    async def save(self, time_entry):
        if time_entry.is_new:
            time_entry.id = self.state.new_id()
        self.state.time_entries[time_entry.id] = _copy(time_entry)
        return self._decorate(time_entry)

    async def find_by_id(self, entry_id):
        entry = self.state.time_entries.get(entry_id)
        return self._decorate(entry) if entry else None

    async def delete(self, entry_id):
        return self.state.time_entries.pop(entry_id, None) is not None

    async def find(self, query: TimeEntryFilter):
        def matches(entry: TimeEntry) -> bool:
            project = self.state.projects.get(entry.project_id)
            return (
                (query.user_id is None or entry.user_id == query.user_id)
                and (query.project_id is None or entry.project_id == query.project_id)
                and (query.client_id is None or (project is not None and project.client_id == query.client_id))
                and (query.start_date is None or entry.date >= query.start_date)
                and (query.end_date is None or entry.date <= query.end_date)
                and (query.timesheet_id is None or entry.timesheet_id == query.timesheet_id)
                and (not query.unattached_only or entry.timesheet_id is None)
            )

        found = [e for e in self.state.time_entries.values() if matches(e)]
        found.sort(key=lambda e: (e.date, e.id), reverse=True)
        return [self._decorate(e) for e in found]

    async def find_by_timesheet(self, timesheet_id):
        found = [e for e in self.state.time_entries.values() if e.timesheet_id == timesheet_id]
        found.sort(key=lambda e: (e.date, e.id))
        return [self._decorate(e) for e in found]

    async def attach_unassigned(self, user_id, start_date, end_date, timesheet_id):
        count = 0
        for entry in self.state.time_entries.values():
            if entry.user_id == user_id and entry.timesheet_id is None and start_date <= entry.date <= end_date:
                entry.timesheet_id = timesheet_id
                count += 1
        return count


class FakeTimesheetRepository(TimesheetRepository):
    def __init__(self, state: StoreState):
        self.state = state

    async def add(self, timesheet):
        for existing in self.state.timesheets.values():
            if existing.user_id == timesheet.user_id and existing.week_start == timesheet.week_start:
                raise DuplicateEntityError("Timesheet", "week_start", str(timesheet.week_start))
        timesheet.id = self.state.new_id()
        self.state.timesheets[timesheet.id] = _copy(timesheet)
        return timesheet

    async def find_by_id(self, timesheet_id, for_update=False):
        return _copy(self.state.timesheets.get(timesheet_id))

    async def find_by_user_and_week(self, user_id, week_start):
        for timesheet in self.state.timesheets.values():
            if timesheet.user_id == user_id and timesheet.week_start == week_start:
                return _copy(timesheet)
        return None

    async def find_covering(self, user_id, day, for_update=False):
        covering = [
            t for t in self.state.timesheets.values()
            if t.user_id == user_id and t.covers(day)
        ]
        if not covering:
            return None
        return _copy(max(covering, key=lambda t: (t.week_start, t.id)))

    async def find(self, query: TimesheetFilter):
        found = [
            t for t in self.state.timesheets.values()
            if (query.user_id is None or t.user_id == query.user_id)
            and (query.status is None or t.status == query.status)
            and (query.start_date is None or t.week_start >= query.start_date)
            and (query.end_date is None or t.week_start <= query.end_date)
        ]
        found.sort(key=lambda t: t.week_start, reverse=True)
        return [_copy(t) for t in found]

    async def transition(self, timesheet, expected_status):
        stored = self.state.timesheets.get(timesheet.id)
        if stored is None or stored.status != expected_status:
            return False
        stored = _copy(timesheet)
        stored.pull_events()
        self.state.timesheets[timesheet.id] = stored
        return True


class FakeApprovalRepository(ApprovalRepository):
    def __init__(self, state: StoreState, store: FakeStore):
        self.state = state
        self.store = store

    async def add(self, approval):
        if self.store.fail_approval_add:
            raise RuntimeError("approval table unavailable")
        approval.id = self.state.new_id()
        self.state.approvals[approval.id] = _copy(approval)
        return approval

    async def find_pending(self, timesheet_id, approver_id):
        for approval in self.state.approvals.values():
            if (approval.timesheet_id == timesheet_id and approval.approver_id == approver_id
                    and approval.status == ApprovalStatus.PENDING):
                return _copy(approval)
        return None

    async def find_by_timesheet(self, timesheet_id):
        found = [a for a in self.state.approvals.values() if a.timesheet_id == timesheet_id]
        return [_copy(a) for a in sorted(found, key=lambda a: a.id, reverse=True)]

    async def find_pending_for_approver(self, approver_id):
        found = [
            a for a in self.state.approvals.values()
            if a.approver_id == approver_id and a.status == ApprovalStatus.PENDING
        ]
        return [_copy(a) for a in sorted(found, key=lambda a: a.id, reverse=True)]

    async def resolve(self, approval, expected_status):
        stored = self.state.approvals.get(approval.id)
        if stored is None or stored.status != expected_status:
            return False
        self.state.approvals[approval.id] = _copy(approval)
        return True


class FakeUnitOfWork(UnitOfWork):
    """Works on a copy of the store; ``commit`` publishes the copy."""

    def __init__(self, store: FakeStore):
        self.store = store
        self.work: Optional[StoreState] = None

    async def __aenter__(self):
        self.work = copy.deepcopy(self.store.state)
        self.users = FakeUserRepository(self.work)
        self.projects = FakeProjectRepository(self.work)
        self.time_entries = FakeTimeEntryRepository(self.work)
        self.timesheets = FakeTimesheetRepository(self.work)
        self.approvals = FakeApprovalRepository(self.work, self.store)
        return await super().__aenter__()

    async def commit(self):
        self.store.state = self.work
        self.work = copy.deepcopy(self.work)
        self.store.commits += 1

    async def rollback(self):
        self.work = None


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def uow(store):
    return FakeUnitOfWork(store)


@pytest.fixture
def dispatcher():
    return EventDispatcher()


@pytest.fixture
def manager(store):
    return store.add_user("manager", role=UserRole.MANAGER)


@pytest.fixture
def employee(store, manager):
    return store.add_user("employee", manager_id=manager.id)


@pytest.fixture
def project(store):
    return store.add_project()


@pytest.fixture
def billable_task(store, project):
    return store.add_task(project, "Development", is_billable=True, hourly_rate=Decimal("100"))


@pytest.fixture
def internal_task(store, project):
    return store.add_task(project, "Meetings", is_billable=False, hourly_rate=None)


@pytest.fixture
def employee_ctx(employee):
    return UseCaseContext(user_id=employee.id, role=UserRole.EMPLOYEE)


@pytest.fixture
def manager_ctx(manager):
    return UseCaseContext(user_id=manager.id, role=UserRole.MANAGER)
