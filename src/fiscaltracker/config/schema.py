"""Pydantic models describing the fiscal configuration schema."""

from __future__ import annotations

import logging
import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing_extensions import Self

_LOGGER = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class Theme(str, Enum):
    """Display themes offered by the presentation layer."""

    COOL = "cool"
    CORPORATE = "corporate"


def parse_calendar_date(value: Any) -> date | None:
    """Return ``value`` as a calendar date, or ``None`` when it cannot be read.

    Accepts ``date`` and ``datetime`` instances as well as ISO 8601 strings in
    either the plain ``YYYY-MM-DD`` form or the full timestamp form written by
    browser ``JSON.stringify`` (``2024-07-28T07:00:00.000Z``). Timestamps keep
    their wall-clock date; no timezone conversion is applied.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


class FiscalConfig(BaseModel):
    """Fiscal calendar settings consumed by the calculators.

    The model is lenient: malformed values are replaced with
    ``None`` (or the default theme) instead of raising, so that the
    calculators can substitute their documented defaults. Unknown keys are
    ignored to tolerate payloads written by older schema versions.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    fiscal_year_start_date: date | None = Field(default=None, alias="fiscalYearStartDate")
    sprint_length_weeks: int | float | None = Field(default=None, alias="sprintLengthWeeks")
    theme: Theme = Theme.COOL
    first_sprint_date: date | None = Field(default=None, alias="firstSprintDate")

    @field_validator("fiscal_year_start_date", "first_sprint_date", mode="before")
    @classmethod
    def _coerce_dates(cls, value: Any) -> date | None:
        parsed = parse_calendar_date(value)
        if parsed is None and value not in (None, ""):
            _LOGGER.warning("Discarding invalid calendar date: %r", value)
        return parsed

    @field_validator("sprint_length_weeks", mode="before")
    @classmethod
    def _coerce_sprint_length(cls, value: Any) -> int | float | None:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, str):
            try:
                value = float(value)
            except ValueError:
                _LOGGER.warning("Discarding non-numeric sprint length: %r", value)
                return None
        if not isinstance(value, (int, float)):
            return None
        try:
            unusable = math.isnan(value)
        except OverflowError:
            unusable = True
        if unusable:
            _LOGGER.warning("Discarding unusable sprint length: %r", value)
            return None
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    @field_validator("theme", mode="before")
    @classmethod
    def _coerce_theme(cls, value: Any) -> Theme:
        if isinstance(value, Theme):
            return value
        try:
            return Theme(str(value).strip().lower())
        except ValueError:
            return Theme.COOL


class FiscalYearStart(ImmutableModel):
    """Month and day on which the fiscal year begins each year."""

    month: int = Field(ge=1, le=12)
    day: int = Field(ge=1, le=31)

    @model_validator(mode="after")
    def _validate_day(self) -> Self:
        try:
            # 2000 is a leap year so that 29 February remains a valid anchor.
            date(2000, self.month, self.day)
        except ValueError as error:
            raise ConfigurationError(
                f"Fiscal year start {self.month}/{self.day} is not a calendar date"
            ) from error
        return self

    def in_year(self, year: int) -> date:
        if self.month == 2 and self.day == 29:
            try:
                return date(year, 2, 29)
            except ValueError:
                return date(year, 3, 1)
        return date(year, self.month, self.day)


class ConfigDefaults(ImmutableModel):
    """Packaged defaults applied when stored configuration is missing fields."""

    storage_key: str
    fiscal_year_start: FiscalYearStart
    sprint_length_weeks: int
    allowed_sprint_lengths: Sequence[int]
    theme: Theme = Theme.COOL

    @field_validator("allowed_sprint_lengths", mode="before")
    @classmethod
    def _coerce_allowed(cls, value: Any) -> Sequence[int]:
        if isinstance(value, (list, tuple)):
            return tuple(sorted({int(entry) for entry in value}))
        raise ConfigurationError("'allowed_sprint_lengths' must be a list of integers")

    @model_validator(mode="after")
    def _validate_defaults(self) -> Self:
        if not self.storage_key.strip():
            raise ConfigurationError("Storage key must be a non-empty string")
        if not self.allowed_sprint_lengths:
            raise ConfigurationError("At least one sprint length must be allowed")
        if any(entry <= 0 for entry in self.allowed_sprint_lengths):
            raise ConfigurationError("Allowed sprint lengths must be positive integers")
        if self.sprint_length_weeks not in self.allowed_sprint_lengths:
            raise ConfigurationError(
                "Default sprint length must be listed in the allowed set"
            )
        return self


__all__ = [
    "ConfigDefaults",
    "ConfigurationError",
    "FiscalConfig",
    "FiscalYearStart",
    "ImmutableModel",
    "Theme",
    "parse_calendar_date",
]
