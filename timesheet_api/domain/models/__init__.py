"""
Domain models for the timesheet service.
This module exports all domain entities and value objects.
"""

# Base classes
from .base import (
    BaseEntity,
    ValueObject,
    WeekRange,
    DomainException,
    ValidationError,
    BusinessRuleViolation,
    InvalidTransitionError,
    LockedTimesheetError,
    ForbiddenError,
    EntityNotFoundError,
    DuplicateEntityError,
)

# Domain entities
from .user import User, UserRole
from .project import Project, Task
from .time_entry import TimeEntry, to_hours
from .timesheet import Timesheet, TimesheetStatus
from .approval import TimesheetApproval, ApprovalStatus, normalize_reason

__all__ = [
    # Base classes
    "BaseEntity",
    "ValueObject",
    "WeekRange",
    "DomainException",
    "ValidationError",
    "BusinessRuleViolation",
    "InvalidTransitionError",
    "LockedTimesheetError",
    "ForbiddenError",
    "EntityNotFoundError",
    "DuplicateEntityError",

    # Entities
    "User",
    "UserRole",
    "Project",
    "Task",
    "TimeEntry",
    "to_hours",
    "Timesheet",
    "TimesheetStatus",
    "TimesheetApproval",
    "ApprovalStatus",
    "normalize_reason",
]
