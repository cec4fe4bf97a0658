from . import timesheets, time_entries
