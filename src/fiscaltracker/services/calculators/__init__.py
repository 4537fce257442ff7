"""Fiscal period calculators."""

from .anchor import FiscalYearWindow, quarter_for_elapsed, resolve_fiscal_year
from .periods import calculate_fiscal_period, get_all_quarters, get_quarter_progress
from .sprints import (
    SprintWindow,
    get_current_sprint_dates,
    get_sprint_progress,
    locate_sprint_window,
)
from .utils import format_percentage, normalise_sprint_length, sprints_per_quarter

__all__ = [
    "FiscalYearWindow",
    "SprintWindow",
    "calculate_fiscal_period",
    "format_percentage",
    "get_all_quarters",
    "get_current_sprint_dates",
    "get_quarter_progress",
    "get_sprint_progress",
    "locate_sprint_window",
    "normalise_sprint_length",
    "quarter_for_elapsed",
    "resolve_fiscal_year",
    "sprints_per_quarter",
]
