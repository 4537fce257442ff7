"""Bundle every calculator output for a single display refresh.

Presentation layers refresh their fiscal display on a fixed interval (once a
second in the reference dashboard). ``build_fiscal_snapshot`` evaluates all
calculators against one reference instant so the period, quarter list and
progress bars never disagree within a refresh. Profiling hooks live here to
keep the calculators themselves free of side effects.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from datetime import date, datetime
from time import perf_counter
from typing import Any

from fiscaltracker.config.schema import FiscalConfig
from fiscaltracker.models import FiscalSnapshot, QuarterSummary

from .calculators import (
    calculate_fiscal_period,
    format_percentage,
    get_all_quarters,
    get_quarter_progress,
    locate_sprint_window,
)
from .calculators.utils import as_wall_clock, coerce_config

_LOGGER = logging.getLogger(__name__)

PROFILE_ENV_VAR = "FISCALTRACKER_PROFILE_SNAPSHOTS"


def _timings_requested() -> bool:
    """Report whether ``PROFILE_ENV_VAR`` asks for per-section snapshot timings."""

    return os.getenv(PROFILE_ENV_VAR, "").strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _timed(label: str, timings: dict[str, float] | None):
    """Record the milliseconds spent in the block under ``label``."""

    started = perf_counter() if timings is not None else 0.0
    try:
        yield
    finally:
        if timings is not None:
            timings[label] = round((perf_counter() - started) * 1000, 3)


def build_fiscal_snapshot(
    config: FiscalConfig | Mapping[str, Any],
    reference: date | datetime | None = None,
) -> FiscalSnapshot:
    """Return the fiscal display state for ``reference``."""

    timings: dict[str, float] | None = {} if _timings_requested() else None
    started = perf_counter()

    config = coerce_config(config)
    now = as_wall_clock(reference)

    with _timed("period", timings):
        period = calculate_fiscal_period(config, now)
        quarter_progress = get_quarter_progress(config, now)

    with _timed("quarters", timings):
        quarters = tuple(
            QuarterSummary(
                **info.model_dump(),
                is_current=info.quarter == period.quarter,
            )
            for info in get_all_quarters(config, now)
        )

    with _timed("sprint", timings):
        sprint_window = locate_sprint_window(config, now)
        sprint_progress = sprint_window.progress(now)

    if timings is not None:
        timings["total"] = round((perf_counter() - started) * 1000, 3)
        _LOGGER.debug("build_fiscal_snapshot timings (ms): %s", timings)

    return FiscalSnapshot(
        reference=now,
        period=period,
        quarter_progress=quarter_progress,
        quarter_progress_label=format_percentage(quarter_progress),
        quarters=quarters,
        sprint=sprint_window.as_dates(),
        sprint_progress=sprint_progress,
        sprint_progress_label=format_percentage(sprint_progress),
    )


__all__ = ["build_fiscal_snapshot"]
