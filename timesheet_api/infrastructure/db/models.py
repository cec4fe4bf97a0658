"""
SQLAlchemy models for the database.
Maps domain entities to database tables.
"""

from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, DateTime, Text, Boolean,
    Numeric, Date, ForeignKey, Enum as SQLEnum,
    Index, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship

from timesheet_api.domain.models.approval import ApprovalStatus
from timesheet_api.domain.models.timesheet import TimesheetStatus
from timesheet_api.domain.models.user import UserRole

from .database import Base


class UserModel(Base):
    """Users table; ``manager_id`` is the reporting line used for approvals."""
    __tablename__ = 'users'

    id = Column(String(36), primary_key=True)
    email = Column(String(255), nullable=False, unique=True)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.EMPLOYEE)
    manager_id = Column(String(36), ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    position = Column(String(255))
    department_name = Column(String(255))
    is_active = Column(Boolean, default=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    manager = relationship("UserModel", remote_side=[id])
    time_entries = relationship("TimeEntryModel", back_populates="user")
    timesheets = relationship("TimesheetModel", back_populates="user")

    __table_args__ = (
        Index('idx_users_manager', 'manager_id'),
    )


class ClientModel(Base):
    """Client table"""
    __tablename__ = 'clients'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)

    projects = relationship("ProjectModel", back_populates="client")


class ProjectModel(Base):
    """Project table"""
    __tablename__ = 'projects'

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey('clients.id'), nullable=True)
    name = Column(String(255), nullable=False)
    code = Column(String(50))
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)

    client = relationship("ClientModel", back_populates="projects")
    tasks = relationship("TaskModel", back_populates="project")


class TaskModel(Base):
    """Task table; supplies billing defaults to new time entries."""
    __tablename__ = 'tasks'

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False)
    name = Column(String(255), nullable=False)
    is_billable = Column(Boolean, nullable=False, default=True)
    hourly_rate = Column(Numeric(10, 2))
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)

    project = relationship("ProjectModel", back_populates="tasks")

    __table_args__ = (
        Index('idx_tasks_project', 'project_id'),
    )


class TimesheetModel(Base):
    """Weekly timesheet table; one row per user and week."""
    __tablename__ = 'timesheets'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    week_start = Column(Date, nullable=False)
    week_end = Column(Date, nullable=False)
    status = Column(SQLEnum(TimesheetStatus), nullable=False, default=TimesheetStatus.DRAFT)

    # Snapshot written at submission
    total_hours = Column(Numeric(6, 2), nullable=False, default=0)
    billable_hours = Column(Numeric(6, 2), nullable=False, default=0)
    non_billable_hours = Column(Numeric(6, 2), nullable=False, default=0)
    submitted_at = Column(DateTime(timezone=True))

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("UserModel", back_populates="timesheets")
    entries = relationship("TimeEntryModel", back_populates="timesheet")
    approvals = relationship("TimesheetApprovalModel", back_populates="timesheet", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint('user_id', 'week_start', name='uq_timesheets_user_week'),
        CheckConstraint('week_end >= week_start', name='check_week_order'),
        Index('idx_timesheets_user_status', 'user_id', 'status'),
    )


class TimeEntryModel(Base):
    """Time entries table"""
    __tablename__ = 'time_entries'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    project_id = Column(Integer, ForeignKey('projects.id'), nullable=False)
    task_id = Column(Integer, ForeignKey('tasks.id'), nullable=False)
    timesheet_id = Column(Integer, ForeignKey('timesheets.id', ondelete='SET NULL'), nullable=True)

    date = Column(Date, nullable=False)
    hours = Column(Numeric(5, 2), nullable=False)
    is_billable = Column(Boolean, nullable=False, default=True)
    hourly_rate = Column(Numeric(10, 2))
    notes = Column(Text)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("UserModel", back_populates="time_entries")
    project = relationship("ProjectModel")
    task = relationship("TaskModel")
    timesheet = relationship("TimesheetModel", back_populates="entries")

    __table_args__ = (
        CheckConstraint('hours > 0 AND hours <= 24', name='check_hours_range'),
        Index('idx_time_entries_user_date', 'user_id', 'date'),
        Index('idx_time_entries_timesheet', 'timesheet_id'),
    )


class TimesheetApprovalModel(Base):
    """Approval requests addressed to the submitter's manager."""
    __tablename__ = 'timesheet_approvals'

    id = Column(Integer, primary_key=True, autoincrement=True)
    timesheet_id = Column(Integer, ForeignKey('timesheets.id', ondelete='CASCADE'), nullable=False)
    approver_id = Column(String(36), ForeignKey('users.id'), nullable=False)
    submitter_id = Column(String(36), ForeignKey('users.id'), nullable=False)
    status = Column(SQLEnum(ApprovalStatus), nullable=False, default=ApprovalStatus.PENDING)
    rejection_reason = Column(Text)
    approved_at = Column(DateTime(timezone=True))
    rejected_at = Column(DateTime(timezone=True))

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)

    timesheet = relationship("TimesheetModel", back_populates="approvals")

    __table_args__ = (
        Index('idx_approvals_approver_status', 'approver_id', 'status'),
        Index('idx_approvals_timesheet', 'timesheet_id'),
    )
