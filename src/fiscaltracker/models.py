"""Pydantic models describing calculator results."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "FiscalPeriod",
    "QuarterInfo",
    "SprintDates",
    "QuarterSummary",
    "FiscalSnapshot",
]


class _ResultModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class FiscalPeriod(_ResultModel):
    """Fiscal coordinates of a single reference date."""

    fiscal_year: int = Field(alias="fiscalYear")
    quarter: int = Field(ge=1, le=4)
    sprint: int = Field(ge=1)
    display_year: str = Field(alias="displayYear")
    sprint_code: str = Field(alias="sprintCode")


class QuarterInfo(_ResultModel):
    """Inclusive calendar range of one fiscal quarter."""

    quarter: int = Field(ge=1, le=4)
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    display_text: str = Field(alias="displayText")

    def contains(self, value: date) -> bool:
        return self.start_date <= value <= self.end_date


class SprintDates(_ResultModel):
    """Inclusive calendar range of one sprint window."""

    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")


class QuarterSummary(QuarterInfo):
    """Quarter list entry flagged when it is the current fiscal quarter."""

    is_current: bool = Field(default=False, alias="isCurrent")


class FiscalSnapshot(_ResultModel):
    """Everything a display needs for one refresh tick."""

    reference: datetime
    period: FiscalPeriod
    quarter_progress: float = Field(ge=0.0, le=1.0, alias="quarterProgress")
    quarter_progress_label: str = Field(alias="quarterProgressLabel")
    quarters: tuple[QuarterSummary, ...]
    sprint: SprintDates
    sprint_progress: float = Field(ge=0.0, le=1.0, alias="sprintProgress")
    sprint_progress_label: str = Field(alias="sprintProgressLabel")

    @property
    def current_quarter(self) -> QuarterSummary | None:
        for entry in self.quarters:
            if entry.is_current:
                return entry
        return None

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-ready mapping using the camelCase field names."""

        return self.model_dump(mode="json", by_alias=True)
