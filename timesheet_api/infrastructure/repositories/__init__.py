"""
SQLAlchemy implementations of the domain repositories.
"""

from .user_repository import SQLAlchemyUserRepository
from .project_repository import SQLAlchemyProjectRepository
from .time_entry_repository import SQLAlchemyTimeEntryRepository
from .timesheet_repository import SQLAlchemyTimesheetRepository
from .approval_repository import SQLAlchemyApprovalRepository
from .unit_of_work import SQLAlchemyUnitOfWork
