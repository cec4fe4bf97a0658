"""
Application use cases.
"""

from .base_use_case import UseCaseContext, UseCaseResult, CommandUseCase, QueryUseCase
from .timesheet_use_cases import (
    GetOrCreateTimesheetUseCase,
    GetTimesheetUseCase,
    ListTimesheetsUseCase,
    SubmitTimesheetUseCase,
    ApproveTimesheetUseCase,
    RejectTimesheetUseCase,
    ReopenTimesheetUseCase,
    ListPendingApprovalsUseCase,
    TimesheetDetails,
    SubmissionOutcome,
    DecisionOutcome,
    PendingApproval,
)
from .time_entry_use_cases import (
    CreateTimeEntryUseCase,
    UpdateTimeEntryUseCase,
    DeleteTimeEntryUseCase,
    ListTimeEntriesUseCase,
    WeeklySummaryUseCase,
    WeeklySummary,
)
