"""Sprint window lookup and sprint progress."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

from fiscaltracker.config.schema import FiscalConfig
from fiscaltracker.models import SprintDates

from .anchor import quarter_for_elapsed, resolve_fiscal_year
from .utils import DAY, as_wall_clock, clamp, coerce_config, normalise_sprint_length


@dataclass(frozen=True)
class SprintWindow:
    """A sprint window on either the anchored or the per-quarter grid."""

    start: datetime
    length: timedelta
    before_anchor: bool = False

    @property
    def last_day(self) -> datetime:
        return self.start + self.length - DAY

    def progress(self, reference: datetime) -> float:
        if self.before_anchor:
            return 0.0
        return clamp((reference - self.start) / self.length, 0.0, 1.0)

    def as_dates(self) -> SprintDates:
        return SprintDates(start_date=self.start.date(), end_date=self.last_day.date())


def locate_sprint_window(config: FiscalConfig, reference: datetime) -> SprintWindow:
    """Return the sprint window containing ``reference``.

    A configured first sprint date anchors a continuous grid of windows; a
    reference before that date reports the first window. Otherwise the grid
    restarts at the exact start of the quarter containing ``reference``.
    """

    length = timedelta(weeks=normalise_sprint_length(config))

    if config.first_sprint_date is not None:
        first = as_wall_clock(config.first_sprint_date)
        if reference < first:
            return SprintWindow(start=first, length=length, before_anchor=True)
        index = (reference - first) // length
        return SprintWindow(start=first + index * length, length=length)

    window = resolve_fiscal_year(config, reference)
    quarter = quarter_for_elapsed(window.exact_days_elapsed(reference))
    quarter_start = window.quarter_start(quarter)

    index = max(timedelta(0), reference - quarter_start) // length
    return SprintWindow(start=quarter_start + index * length, length=length)


def get_current_sprint_dates(
    config: FiscalConfig | Mapping[str, Any],
    reference: date | datetime | None = None,
) -> SprintDates:
    """Return the first and last day of the sprint containing ``reference``."""

    config = coerce_config(config)
    return locate_sprint_window(config, as_wall_clock(reference)).as_dates()


def get_sprint_progress(
    config: FiscalConfig | Mapping[str, Any],
    reference: date | datetime | None = None,
) -> float:
    """Return the fraction of the current sprint elapsed, between 0 and 1."""

    config = coerce_config(config)
    now = as_wall_clock(reference)
    return locate_sprint_window(config, now).progress(now)
