"""
Domain events for the timesheet service.
"""

from .base import (
    DomainEvent,
    EventHandler,
    EventDispatcher,
    get_event_dispatcher,
)
from .timesheet_events import (
    TimesheetSubmittedEvent,
    TimesheetApprovedEvent,
    TimesheetRejectedEvent,
    TimesheetReopenedEvent,
)

__all__ = [
    "DomainEvent",
    "EventHandler",
    "EventDispatcher",
    "get_event_dispatcher",
    "TimesheetSubmittedEvent",
    "TimesheetApprovedEvent",
    "TimesheetRejectedEvent",
    "TimesheetReopenedEvent",
]
