"""
Repository interfaces for the domain layer.
This module exports all repository interfaces (ports) for dependency injection.
"""

from .filters import TimeEntryFilter, TimesheetFilter
from .user_repository import UserRepository
from .project_repository import ProjectRepository
from .time_entry_repository import TimeEntryRepository
from .timesheet_repository import TimesheetRepository
from .approval_repository import ApprovalRepository
from .unit_of_work import UnitOfWork

__all__ = [
    "TimeEntryFilter",
    "TimesheetFilter",
    "UserRepository",
    "ProjectRepository",
    "TimeEntryRepository",
    "TimesheetRepository",
    "ApprovalRepository",
    "UnitOfWork",
]
