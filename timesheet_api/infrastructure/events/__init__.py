"""
Event infrastructure: handler registration and notifications.
"""

from .event_setup import initialize_event_system, setup_event_handlers, get_notification_handler
from .notification_handlers import AuditLogHandler, TimesheetNotificationHandler, Notification
