"""
Mappers between domain entities and SQLAlchemy models.
"""

from .user_mapper import UserMapper
from .project_mapper import ProjectMapper, TaskMapper
from .time_entry_mapper import TimeEntryMapper
from .timesheet_mapper import TimesheetMapper, ApprovalMapper
