"""Utilities for validating fiscal configuration and surfacing issues."""

from __future__ import annotations

import argparse
import calendar
import json
import math
from datetime import date
from pathlib import Path
from typing import Any, Sequence

from .schema import ConfigurationError, FiscalConfig
from .store import load_defaults, parse_config
from ..version import get_project_version


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_fiscal_year_start(config: FiscalConfig) -> list[str]:
    if config.fiscal_year_start_date is not None:
        return []

    start = load_defaults().fiscal_year_start
    month_name = calendar.month_name[start.month]
    return [
        _format_scope(
            "fiscalYearStartDate",
            f"missing; calculations fall back to {month_name} {start.day}",
        )
    ]


def _validate_sprint_length(config: FiscalConfig) -> list[str]:
    errors: list[str] = []
    value = config.sprint_length_weeks

    if value is None:
        return [_format_scope("sprintLengthWeeks", "missing; calculations use 2 weeks")]

    if not math.isfinite(value) or value <= 0:
        errors.append(_format_scope("sprintLengthWeeks", "must be a positive number of weeks"))
        return errors

    if not float(value).is_integer():
        errors.append(
            _format_scope(
                "sprintLengthWeeks",
                f"{value} is not a whole number of weeks and will be rounded down",
            )
        )

    allowed = load_defaults().allowed_sprint_lengths
    if int(value) not in allowed:
        allowed_text = ", ".join(str(entry) for entry in allowed)
        errors.append(
            _format_scope(
                "sprintLengthWeeks",
                f"{value} is outside the supported sprint lengths ({allowed_text})",
            )
        )

    return errors


def first_sprint_window(fiscal_year_start: date) -> tuple[date, date]:
    """Return the inclusive range in which a first sprint date may fall.

    The range runs from the first day of the fiscal start month through the
    last day of the month two months later in the following year.
    """

    earliest = date(fiscal_year_start.year, fiscal_year_start.month, 1)

    month_index = fiscal_year_start.month + 2
    year = fiscal_year_start.year + 1 + (month_index - 1) // 12
    month = (month_index - 1) % 12 + 1
    latest = date(year, month, calendar.monthrange(year, month)[1])
    return earliest, latest


def _validate_first_sprint_date(config: FiscalConfig) -> list[str]:
    first_sprint = config.first_sprint_date
    fiscal_start = config.fiscal_year_start_date
    if first_sprint is None or fiscal_start is None:
        return []

    earliest, latest = first_sprint_window(fiscal_start)
    if earliest <= first_sprint <= latest:
        return []

    return [
        _format_scope(
            "firstSprintDate",
            (
                f"{first_sprint.isoformat()} falls outside the expected window "
                f"{earliest.isoformat()} to {latest.isoformat()}"
            ),
        )
    ]


def validate_configuration(config: FiscalConfig) -> list[str]:
    """Return a list of advisory issues for the provided configuration."""

    errors: list[str] = []

    errors.extend(_validate_fiscal_year_start(config))
    errors.extend(_validate_sprint_length(config))
    errors.extend(_validate_first_sprint_date(config))

    return errors


def validate_stored_payload(payload: Any, *, today: date | None = None) -> list[str]:
    """Validate a stored JSON payload as the configuration store would read it."""

    try:
        config = parse_config(payload, today=today)
    except ConfigurationError as error:
        return [_format_scope("payload", str(error))]
    return validate_configuration(config)


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate stored fiscal configuration files and report issues."
    )
    parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="JSON files holding stored fiscal configuration payloads",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {get_project_version()}",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    exit_code = 0

    for path in args.paths:
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as error:
            print(f"[{path}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_stored_payload(payload)
        if issues:
            exit_code = 1
            print(f"[{path}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{path}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
