"""Fiscal year, quarter and sprint identifiers for a reference date."""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from fiscaltracker.config.schema import FiscalConfig
from fiscaltracker.models import FiscalPeriod, QuarterInfo

from .anchor import quarter_for_elapsed, quarter_start_offset, resolve_fiscal_year
from .utils import (
    DAY,
    DAYS_PER_QUARTER,
    as_wall_clock,
    clamp,
    coerce_config,
    format_long_date,
    normalise_sprint_length,
    sprints_per_quarter,
    whole_days_between,
)


def _anchored_sprint(
    first_sprint_date: date, reference: datetime, sprint_length_weeks: int, max_sprints: int
) -> int:
    days_since_first = whole_days_between(as_wall_clock(first_sprint_date), reference)
    windows_elapsed = max(0, days_since_first // (7 * sprint_length_weeks))
    return windows_elapsed % max_sprints + 1


def _quarter_sprint(days_since_start: int, quarter: int, sprint_length_weeks: int) -> int:
    days_into_quarter = max(0.0, days_since_start - quarter_start_offset(quarter))
    weeks_into_quarter = math.floor(days_into_quarter / 7)
    return max(1, weeks_into_quarter // sprint_length_weeks + 1)


def calculate_fiscal_period(
    config: FiscalConfig | Mapping[str, Any],
    reference: date | datetime | None = None,
) -> FiscalPeriod:
    """Return the fiscal year, quarter and sprint containing ``reference``.

    With a first sprint date configured, sprints form a continuous grid from
    that date and the sprint number cycles through the sprints of a quarter.
    Without one, sprint numbering restarts at every quarter boundary.
    """

    config = coerce_config(config)
    now = as_wall_clock(reference)
    window = resolve_fiscal_year(config, now)

    days_since_start = window.whole_days_elapsed(now)
    quarter = quarter_for_elapsed(days_since_start)

    sprint_length = normalise_sprint_length(config)
    max_sprints = sprints_per_quarter(sprint_length)

    if config.first_sprint_date is not None:
        sprint = _anchored_sprint(config.first_sprint_date, now, sprint_length, max_sprints)
    else:
        sprint = _quarter_sprint(days_since_start, quarter, sprint_length)
    sprint = int(clamp(sprint, 1, max_sprints))

    return FiscalPeriod(
        fiscal_year=window.fiscal_year,
        quarter=quarter,
        sprint=sprint,
        display_year=f"FY{window.fiscal_year} Q{quarter}",
        sprint_code=f"{window.fiscal_year}.{quarter}.{sprint}",
    )


def get_quarter_progress(
    config: FiscalConfig | Mapping[str, Any],
    reference: date | datetime | None = None,
) -> float:
    """Return the fraction of the current quarter elapsed, between 0 and 1."""

    config = coerce_config(config)
    now = as_wall_clock(reference)
    window = resolve_fiscal_year(config, now)

    days_since_start = window.whole_days_elapsed(now)
    quarter = quarter_for_elapsed(days_since_start)
    days_into_quarter = max(0.0, days_since_start - quarter_start_offset(quarter))

    return clamp(days_into_quarter / DAYS_PER_QUARTER, 0.0, 1.0)


def get_all_quarters(
    config: FiscalConfig | Mapping[str, Any],
    reference: date | datetime | None = None,
) -> list[QuarterInfo]:
    """Return the four quarters of the fiscal year containing ``reference``.

    Quarter four absorbs the fractional-day remainder and ends the day before
    the next fiscal year begins, so the quarters tile the year exactly.
    """

    config = coerce_config(config)
    now = as_wall_clock(reference)
    window = resolve_fiscal_year(config, now)
    fiscal_year_short = str(window.fiscal_year)[-2:]

    quarters: list[QuarterInfo] = []
    for quarter in range(1, 5):
        start_date = window.quarter_start_date(quarter)
        if quarter == 4:
            end_date = (window.next_start - DAY).date()
        else:
            end_date = window.quarter_start_date(quarter + 1) - DAY

        quarters.append(
            QuarterInfo(
                quarter=quarter,
                start_date=start_date,
                end_date=end_date,
                display_text=(
                    f"Q{quarter} FY{fiscal_year_short} – "
                    f"{format_long_date(start_date)} – {format_long_date(end_date)}"
                ),
            )
        )

    return quarters
