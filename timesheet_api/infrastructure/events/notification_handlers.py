"""
Event handlers for workflow notifications.
Converts timesheet domain events into notifications for the people involved.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, Optional

from timesheet_api.domain.events.base import EventHandler, DomainEvent
from timesheet_api.domain.events.timesheet_events import (
    TimesheetSubmittedEvent,
    TimesheetApprovedEvent,
    TimesheetRejectedEvent,
    TimesheetReopenedEvent,
)


logger = logging.getLogger(__name__)


@dataclass
class Notification:
    recipient_id: str
    subject: str
    body: str
    created_at: datetime = field(default_factory=datetime.utcnow)


class AuditLogHandler(EventHandler):
    """Global handler recording every event in the application log."""

    async def handle(self, event: DomainEvent) -> None:
        logger.info(f"Audit: {event.event_type} (ID: {event.event_id}) {event.to_dict()['data']}")


class TimesheetNotificationHandler(EventHandler):
    """
    Handler for timesheet workflow notifications.
    Delivery is a log line; the most recent notifications are kept in
    ``outbox`` for inspection.
    """

    def __init__(self, outbox_size: int = 100):
        self.outbox: Deque[Notification] = deque(maxlen=outbox_size)

    def can_handle(self, event: DomainEvent) -> bool:
        return isinstance(event, (
            TimesheetSubmittedEvent,
            TimesheetApprovedEvent,
            TimesheetRejectedEvent,
            TimesheetReopenedEvent,
        ))

    async def handle(self, event: DomainEvent) -> None:
        notification = self._build(event)
        if notification is None:
            return
        self.outbox.append(notification)
        logger.info(f"Notify {notification.recipient_id}: {notification.subject}")

    def _build(self, event: DomainEvent) -> Optional[Notification]:
        if isinstance(event, TimesheetSubmittedEvent):
            if not event.approver_id:
                logger.warning(f"Timesheet {event.timesheet_id} submitted without an approver")
                return None
            return Notification(
                recipient_id=event.approver_id,
                subject="Timesheet awaiting approval",
                body=f"Timesheet {event.timesheet_id} of user {event.user_id} "
                     f"was submitted with {event.total_hours} hours.",
            )

        if isinstance(event, TimesheetApprovedEvent):
            return Notification(
                recipient_id=event.user_id,
                subject="Timesheet approved",
                body=f"Your timesheet {event.timesheet_id} was approved.",
            )

        if isinstance(event, TimesheetRejectedEvent):
            return Notification(
                recipient_id=event.user_id,
                subject="Timesheet rejected",
                body=f"Your timesheet {event.timesheet_id} was rejected: {event.reason}",
            )

        if isinstance(event, TimesheetReopenedEvent):
            return Notification(
                recipient_id=event.user_id,
                subject="Timesheet reopened",
                body=f"Timesheet {event.timesheet_id} is a draft again and can be corrected.",
            )

        return None
