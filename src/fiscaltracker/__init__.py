"""Fiscal year, quarter and sprint tracking for configurable fiscal calendars."""

from fiscaltracker.config import ConfigStore, FiscalConfig, Theme
from fiscaltracker.models import FiscalPeriod, FiscalSnapshot, QuarterInfo, SprintDates
from fiscaltracker.services import (
    build_fiscal_snapshot,
    calculate_fiscal_period,
    get_all_quarters,
    get_current_sprint_dates,
    get_quarter_progress,
    get_sprint_progress,
)

__all__ = [
    "ConfigStore",
    "FiscalConfig",
    "FiscalPeriod",
    "FiscalSnapshot",
    "QuarterInfo",
    "SprintDates",
    "Theme",
    "build_fiscal_snapshot",
    "calculate_fiscal_period",
    "get_all_quarters",
    "get_current_sprint_dates",
    "get_quarter_progress",
    "get_sprint_progress",
]
