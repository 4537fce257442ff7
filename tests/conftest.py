"""Test configuration utilities and shared fixtures."""

import sys
from datetime import date
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402

from fiscaltracker.config import FiscalConfig, InMemoryKeyValueStore, load_defaults  # noqa: E402


@pytest.fixture()
def july_config() -> FiscalConfig:
    """Fiscal year starting July 28 with two-week sprints restarting each quarter."""

    return FiscalConfig(fiscal_year_start_date=date(2024, 7, 28), sprint_length_weeks=2)


@pytest.fixture()
def anchored_config() -> FiscalConfig:
    """Fiscal year starting July 28 with two-week sprints anchored on the same day."""

    return FiscalConfig(
        fiscal_year_start_date=date(2024, 7, 28),
        sprint_length_weeks=2,
        first_sprint_date=date(2024, 7, 28),
    )


@pytest.fixture()
def backend() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture(autouse=True)
def _reset_defaults_cache():
    load_defaults.cache_clear()
    yield
    load_defaults.cache_clear()
