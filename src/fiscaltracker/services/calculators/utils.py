"""Utility helpers for calculator modules."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import date, datetime, timedelta
from typing import Any

from fiscaltracker.config.schema import FiscalConfig

_LOGGER = logging.getLogger(__name__)

DAY = timedelta(days=1)
DAYS_PER_QUARTER = 365 / 4
WEEKS_PER_QUARTER = 13
DEFAULT_SPRINT_LENGTH_WEEKS = 2
MAX_SPRINT_LENGTH_WEEKS = 52

# References are clamped into this range so that the neighbouring fiscal years
# and sprint windows stay representable as datetimes.
EARLIEST_REFERENCE = datetime(2, 1, 1)
LATEST_REFERENCE = datetime(9998, 12, 31, 23, 59, 59, 999999)

# Anchor used when the configuration carries no usable fiscal year start.
DEFAULT_FISCAL_YEAR_START_MONTH = 7
DEFAULT_FISCAL_YEAR_START_DAY = 28


def coerce_config(config: FiscalConfig | Mapping[str, Any]) -> FiscalConfig:
    """Return ``config`` as a :class:`FiscalConfig`, validating mappings leniently."""

    if isinstance(config, FiscalConfig):
        return config
    return FiscalConfig.model_validate(config)


def as_wall_clock(value: date | datetime | None) -> datetime:
    """Return a naive datetime holding the wall-clock fields of ``value``.

    ``None`` means the current local time. Plain dates map to midnight and any
    timezone information is dropped without conversion. Values in year 1 or
    year 9999 are clamped to :data:`EARLIEST_REFERENCE` and
    :data:`LATEST_REFERENCE`.
    """

    if value is None:
        moment = datetime.now()
    elif isinstance(value, datetime):
        moment = value.replace(tzinfo=None)
    else:
        moment = datetime(value.year, value.month, value.day)

    if not EARLIEST_REFERENCE <= moment <= LATEST_REFERENCE:
        _LOGGER.debug("Clamping out-of-range reference %s", moment.isoformat())
        moment = clamp(moment, EARLIEST_REFERENCE, LATEST_REFERENCE)
    return moment


def elapsed_days(start: datetime, end: datetime) -> float:
    """Return the exact number of days from ``start`` to ``end``."""

    return (end - start) / DAY


def whole_days_between(start: datetime, end: datetime) -> int:
    """Return the elapsed days from ``start`` to ``end`` rounded down."""

    return math.floor(elapsed_days(start, end))


def clamp(value: float, lower: float, upper: float) -> float:
    return min(max(value, lower), upper)


def normalise_sprint_length(config: FiscalConfig) -> int:
    """Return the sprint length in whole weeks, between one and a year."""

    weeks = config.sprint_length_weeks
    if not weeks or not math.isfinite(weeks):
        if weeks is not None:
            _LOGGER.debug("Replacing unusable sprint length %r with default", weeks)
        weeks = DEFAULT_SPRINT_LENGTH_WEEKS
    return min(max(1, math.floor(weeks)), MAX_SPRINT_LENGTH_WEEKS)


def sprints_per_quarter(sprint_length_weeks: int) -> int:
    return max(1, WEEKS_PER_QUARTER // sprint_length_weeks)


def format_long_date(value: date) -> str:
    """Return ``value`` formatted as ``July 28, 2024``."""

    return f"{value:%B} {value.day}, {value.year}"


def format_percentage(value: float) -> str:
    """Return a one-decimal completion label for the fraction ``value``."""

    return f"{value * 100:.1f}% Complete"
