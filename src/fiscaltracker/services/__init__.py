"""Service-layer helpers for the fiscal tracker."""

from .calculators import (
    calculate_fiscal_period,
    get_all_quarters,
    get_current_sprint_dates,
    get_quarter_progress,
    get_sprint_progress,
)
from .snapshot_service import build_fiscal_snapshot

__all__ = [
    "build_fiscal_snapshot",
    "calculate_fiscal_period",
    "get_all_quarters",
    "get_current_sprint_dates",
    "get_quarter_progress",
    "get_sprint_progress",
]
