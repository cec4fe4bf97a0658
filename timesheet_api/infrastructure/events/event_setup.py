"""
Event system setup and configuration.
Registers all event handlers with the event dispatcher.
"""

import logging
from typing import Optional

from timesheet_api.domain.events.base import EventDispatcher, get_event_dispatcher
from .notification_handlers import AuditLogHandler, TimesheetNotificationHandler

logger = logging.getLogger(__name__)

TIMESHEET_EVENTS = (
    "TimesheetSubmitted",
    "TimesheetApproved",
    "TimesheetRejected",
    "TimesheetReopened",
)

_notification_handler: Optional[TimesheetNotificationHandler] = None


def get_notification_handler() -> Optional[TimesheetNotificationHandler]:
    return _notification_handler


def setup_event_handlers(dispatcher: Optional[EventDispatcher] = None) -> TimesheetNotificationHandler:
    """Set up and register all event handlers."""
    dispatcher = dispatcher or get_event_dispatcher()

    notification_handler = TimesheetNotificationHandler()

    # Register global handler for logging
    dispatcher.register_global_handler(AuditLogHandler())

    for event_type in TIMESHEET_EVENTS:
        dispatcher.register_handler(event_type, notification_handler)

    logger.info("Event handlers registered successfully")

    registered = dispatcher.get_registered_handlers()
    for event_type, handlers in registered.items():
        logger.info(f"Event {event_type}: {', '.join(handlers)} handlers")

    return notification_handler


def initialize_event_system() -> None:
    """Initialize the event system once per process."""
    global _notification_handler
    if _notification_handler is not None:
        return

    try:
        _notification_handler = setup_event_handlers()
        logger.info("Event system initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize event system: {str(e)}")
        raise
