"""
Application DTOs.
Request and response shapes exchanged with the web layer.
"""

from .base_dto import (
    BaseDTO, RequestDTO, ResponseDTO, Hours
)
from .time_entry_dto import (
    CreateTimeEntryRequestDTO, UpdateTimeEntryRequestDTO, UpdateTimeEntryCommandDTO,
    DeleteTimeEntryRequestDTO, ListTimeEntriesRequestDTO, WeeklySummaryRequestDTO,
    TimeEntryResponseDTO, ProjectHoursDTO, TimeSummaryResponseDTO, WeeklySummaryResponseDTO
)
from .timesheet_dto import (
    CreateTimesheetRequestDTO, TimesheetRequestDTO, RejectTimesheetBodyDTO,
    RejectTimesheetRequestDTO, ListTimesheetsRequestDTO, UserSummaryDTO,
    TimesheetResponseDTO, ApprovalResponseDTO, TimesheetDetailResponseDTO,
    SubmissionResponseDTO, DecisionResponseDTO, PendingApprovalResponseDTO
)
