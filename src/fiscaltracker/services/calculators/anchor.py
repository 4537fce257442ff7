"""Fiscal-year anchor resolution shared by every calculator."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from fiscaltracker.config.schema import FiscalConfig

from .utils import (
    DAYS_PER_QUARTER,
    DEFAULT_FISCAL_YEAR_START_DAY,
    DEFAULT_FISCAL_YEAR_START_MONTH,
    elapsed_days,
    whole_days_between,
)

_LOGGER = logging.getLogger(__name__)


def transpose_anchor(month: int, day: int, year: int) -> datetime:
    """Return midnight of ``month``/``day`` in ``year``.

    A 29 February anchor rolls over to 1 March in years without a leap day.
    """

    try:
        return datetime(year, month, day)
    except ValueError:
        return datetime(year, month, 1) + timedelta(days=day - 1)


def quarter_for_elapsed(days: float) -> int:
    """Return the 1-based quarter containing ``days`` elapsed since the anchor."""

    if days < 0:
        return 1
    return min(math.floor(days / DAYS_PER_QUARTER) + 1, 4)


def quarter_start_offset(quarter: int) -> float:
    """Return the fractional day offset at which ``quarter`` begins."""

    return (quarter - 1) * DAYS_PER_QUARTER


@dataclass(frozen=True)
class FiscalYearWindow:
    """The fiscal year containing a reference date."""

    fiscal_year: int
    start: datetime
    next_start: datetime

    def whole_days_elapsed(self, reference: datetime) -> int:
        return whole_days_between(self.start, reference)

    def exact_days_elapsed(self, reference: datetime) -> float:
        return elapsed_days(self.start, reference)

    def quarter_start(self, quarter: int) -> datetime:
        """Return the exact instant ``quarter`` begins on the 91.25-day grid."""

        return self.start + timedelta(days=quarter_start_offset(quarter))

    def quarter_start_date(self, quarter: int) -> date:
        """Return the calendar date ``quarter`` begins on."""

        offset = math.floor(quarter_start_offset(quarter))
        return (self.start + timedelta(days=offset)).date()


def _anchor_month_day(config: FiscalConfig) -> tuple[int, int]:
    anchor = config.fiscal_year_start_date
    if anchor is None:
        _LOGGER.debug("No fiscal year start configured; using default anchor")
        return DEFAULT_FISCAL_YEAR_START_MONTH, DEFAULT_FISCAL_YEAR_START_DAY
    return anchor.month, anchor.day


def resolve_fiscal_year(config: FiscalConfig, reference: datetime) -> FiscalYearWindow:
    """Return the fiscal year window that contains ``reference``.

    The anchor's month and day are transposed into the reference year. On or
    after that instant the fiscal year began this calendar year and is labelled
    with the following year; before it, the fiscal year began last calendar
    year and carries the reference year as its label.
    """

    month, day = _anchor_month_day(config)
    current_year_start = transpose_anchor(month, day, reference.year)

    if reference >= current_year_start:
        fiscal_year = reference.year + 1
        start = current_year_start
    else:
        fiscal_year = reference.year
        start = transpose_anchor(month, day, reference.year - 1)

    next_start = transpose_anchor(month, day, start.year + 1)
    return FiscalYearWindow(fiscal_year=fiscal_year, start=start, next_start=next_start)
