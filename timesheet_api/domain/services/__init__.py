"""
Domain services.
"""

from .time_aggregator import TimeAggregator, TimeSummary, ProjectHours
from .timesheet_rules import (
    can_mutate,
    ensure_can_mutate,
    is_owner_or_elevated,
    ensure_owner_or_elevated,
)

__all__ = [
    "TimeAggregator",
    "TimeSummary",
    "ProjectHours",
    "can_mutate",
    "ensure_can_mutate",
    "is_owner_or_elevated",
    "ensure_owner_or_elevated",
]
