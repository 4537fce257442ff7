"""Unit tests for sprint window lookup and sprint progress."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from fiscaltracker.config import FiscalConfig
from fiscaltracker.models import SprintDates
from fiscaltracker.services.calculators import (
    get_current_sprint_dates,
    get_sprint_progress,
    locate_sprint_window,
)


def test_anchored_window_after_one_full_sprint(anchored_config: FiscalConfig) -> None:
    dates = get_current_sprint_dates(anchored_config, datetime(2024, 8, 11))

    assert dates == SprintDates(start_date=date(2024, 8, 11), end_date=date(2024, 8, 24))
    assert get_sprint_progress(anchored_config, datetime(2024, 8, 11)) == 0.0


def test_anchored_progress_is_time_based(anchored_config: FiscalConfig) -> None:
    progress = get_sprint_progress(anchored_config, datetime(2024, 8, 11, 12))

    assert progress == pytest.approx(0.5 / 14)


def test_before_first_sprint_reports_first_window(anchored_config: FiscalConfig) -> None:
    reference = datetime(2024, 7, 1)

    assert get_current_sprint_dates(anchored_config, reference) == SprintDates(
        start_date=date(2024, 7, 28), end_date=date(2024, 8, 10)
    )
    assert get_sprint_progress(anchored_config, reference) == 0.0


def test_anchored_grid_ignores_quarter_boundaries() -> None:
    config = FiscalConfig(
        fiscal_year_start_date=date(2024, 7, 28),
        sprint_length_weeks=3,
        first_sprint_date=date(2024, 8, 5),
    )

    # Quarter two has begun by midday October 27, but the window from
    # October 7 keeps running on the continuous grid.
    dates = get_current_sprint_dates(config, datetime(2024, 10, 27, 12))

    assert dates == SprintDates(start_date=date(2024, 10, 7), end_date=date(2024, 10, 27))


def test_fallback_window_within_first_quarter(july_config: FiscalConfig) -> None:
    dates = get_current_sprint_dates(july_config, datetime(2024, 8, 11))

    assert dates == SprintDates(start_date=date(2024, 8, 11), end_date=date(2024, 8, 24))


def test_fallback_last_window_of_quarter_runs_past_boundary(july_config: FiscalConfig) -> None:
    # Day 91 still belongs to quarter one on the 91.25-day grid.
    dates = get_current_sprint_dates(july_config, datetime(2024, 10, 27))

    assert dates == SprintDates(start_date=date(2024, 10, 20), end_date=date(2024, 11, 2))


def test_fallback_grid_restarts_at_quarter_start(july_config: FiscalConfig) -> None:
    reference = datetime(2024, 10, 28)

    dates = get_current_sprint_dates(july_config, reference)
    window = locate_sprint_window(july_config, reference)

    # Quarter two starts 91.25 days after July 28, at 06:00 on October 27.
    assert window.start == datetime(2024, 10, 27, 6)
    assert dates == SprintDates(start_date=date(2024, 10, 27), end_date=date(2024, 11, 9))
    assert get_sprint_progress(july_config, reference) == pytest.approx(0.75 / 14)


def test_fallback_before_default_anchor_uses_previous_fiscal_year() -> None:
    config = FiscalConfig(sprint_length_weeks=4)

    dates = get_current_sprint_dates(config, datetime(2025, 7, 27))

    # July 28, 2024 + 273.75 days is April 27, 2025 at 18:00; the fourth
    # 28-day window of quarter four starts July 20.
    assert dates == SprintDates(start_date=date(2025, 7, 20), end_date=date(2025, 8, 16))


@pytest.mark.parametrize("first_sprint_date", [None, date(2024, 8, 4)])
def test_sprint_progress_is_monotonic_and_resets(first_sprint_date) -> None:
    config = FiscalConfig(
        fiscal_year_start_date=date(2024, 7, 28),
        sprint_length_weeks=2,
        first_sprint_date=first_sprint_date,
    )
    reference = datetime(2024, 8, 4)
    previous_window = locate_sprint_window(config, reference)
    previous_progress = get_sprint_progress(config, reference)

    for _ in range(24 * 120):
        reference += timedelta(hours=1)
        window = locate_sprint_window(config, reference)
        progress = get_sprint_progress(config, reference)

        assert 0.0 <= progress <= 1.0
        if window.start == previous_window.start:
            assert progress >= previous_progress
        else:
            assert progress < 0.05
        previous_window, previous_progress = window, progress


@pytest.mark.parametrize("weeks", [None, 0, -2, 1.5])
def test_degenerate_sprint_lengths_still_produce_windows(weeks) -> None:
    config = FiscalConfig(fiscal_year_start_date=date(2024, 7, 28), sprint_length_weeks=weeks)

    dates = get_current_sprint_dates(config, datetime(2024, 9, 1))

    assert dates.start_date <= date(2024, 9, 1) <= dates.end_date
    assert (dates.end_date - dates.start_date).days in {6, 13}


def test_sprint_lookup_is_idempotent(anchored_config: FiscalConfig) -> None:
    reference = datetime(2025, 2, 14, 9, 30)

    assert get_current_sprint_dates(anchored_config, reference) == get_current_sprint_dates(
        anchored_config, reference
    )
    assert get_sprint_progress(anchored_config, reference) == get_sprint_progress(
        anchored_config, reference
    )
