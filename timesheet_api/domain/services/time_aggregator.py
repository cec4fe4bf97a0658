"""Time aggregation service.
Computes billable / non-billable totals and groupings from time entries.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Any

from timesheet_api.domain.models.time_entry import TimeEntry


ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass
class ProjectHours:
    """Hours logged against one project."""

    project_id: int
    name: Optional[str]
    client_name: Optional[str]
    hours: Decimal = ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project_id": self.project_id,
            "name": self.name,
            "client_name": self.client_name,
            "hours": self.hours,
        }


@dataclass
class TimeSummary:
    """Result of :meth:`TimeAggregator.summarize`."""

    total_hours: Decimal = ZERO
    billable_hours: Decimal = ZERO
    non_billable_hours: Decimal = ZERO
    billable_percentage: Decimal = ZERO
    by_day: Dict[date, Decimal] = field(default_factory=dict)
    by_project: List[ProjectHours] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_hours": self.total_hours,
            "billable_hours": self.billable_hours,
            "non_billable_hours": self.non_billable_hours,
            "billable_percentage": self.billable_percentage,
            "by_day": {day.isoformat(): hours for day, hours in self.by_day.items()},
            "by_project": [group.to_dict() for group in self.by_project],
        }


class TimeAggregator:
    """
    Domain service for hour totals.

    Pure and deterministic: it never touches a repository and does not
    filter its input. Callers pass entries already narrowed to one user
    and date window.
    """

    def summarize(self, entries: Iterable[TimeEntry]) -> TimeSummary:
        total = ZERO
        billable = ZERO
        by_day: Dict[date, Decimal] = {}
        by_project: Dict[int, ProjectHours] = {}

        for entry in entries:
            hours = entry.hours
            total += hours
            if entry.is_billable:
                billable += hours

            day = self._calendar_day(entry.date)
            by_day[day] = by_day.get(day, ZERO) + hours

            group = by_project.get(entry.project_id)
            if group is None:
                # First entry seen for a project supplies its display names
                group = ProjectHours(
                    project_id=entry.project_id,
                    name=entry.project_name,
                    client_name=entry.client_name,
                )
                by_project[entry.project_id] = group
            group.hours += hours

        return TimeSummary(
            total_hours=total,
            billable_hours=billable,
            non_billable_hours=total - billable,
            billable_percentage=self.billable_percentage(billable, total),
            by_day=by_day,
            by_project=list(by_project.values()),
        )

    @staticmethod
    def billable_percentage(billable_hours: Decimal, total_hours: Decimal) -> Decimal:
        if total_hours <= 0:
            return ZERO
        return billable_hours / total_hours * HUNDRED

    @staticmethod
    def _calendar_day(value: date) -> date:
        # datetime is a subclass of date; keep only the date component
        if hasattr(value, "date") and callable(value.date):
            return value.date()
        return value
