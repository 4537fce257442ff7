from __future__ import annotations

import json
from datetime import date

import pytest

from fiscaltracker.config import FiscalConfig, default_config
from fiscaltracker.config import validator as validator_module
from fiscaltracker.config.validator import (
    first_sprint_window,
    main,
    validate_configuration,
    validate_stored_payload,
)

TODAY = date(2026, 10, 19)


def test_default_configuration_is_valid() -> None:
    assert validate_configuration(default_config(TODAY)) == []


def test_validator_flags_missing_start_date() -> None:
    errors = validate_configuration(FiscalConfig(sprint_length_weeks=3))

    assert errors == ["fiscalYearStartDate: missing; calculations fall back to July 28"]


def test_validator_flags_unsupported_sprint_length() -> None:
    config = default_config(TODAY).model_copy(update={"sprint_length_weeks": 5})

    errors = validate_configuration(config)

    assert any("sprintLengthWeeks" in error and "(2, 3, 4)" in error for error in errors)


def test_validator_flags_fractional_and_non_positive_lengths() -> None:
    fractional = default_config(TODAY).model_copy(update={"sprint_length_weeks": 2.5})
    negative = default_config(TODAY).model_copy(update={"sprint_length_weeks": -1})

    assert any("whole number" in error for error in validate_configuration(fractional))
    assert validate_configuration(negative) == [
        "sprintLengthWeeks: must be a positive number of weeks"
    ]


def test_first_sprint_window_spans_into_following_year() -> None:
    assert first_sprint_window(date(2024, 7, 28)) == (date(2024, 7, 1), date(2025, 9, 30))
    assert first_sprint_window(date(2024, 11, 15)) == (date(2024, 11, 1), date(2026, 1, 31))


def test_validator_flags_first_sprint_outside_window() -> None:
    config = FiscalConfig(
        fiscal_year_start_date=date(2024, 7, 28),
        sprint_length_weeks=2,
        first_sprint_date=date(2023, 1, 9),
    )

    errors = validate_configuration(config)

    assert len(errors) == 1
    assert errors[0].startswith("firstSprintDate: 2023-01-09 falls outside")


def test_validate_stored_payload_reports_rejections() -> None:
    errors = validate_stored_payload({"schemaVersion": 42}, today=TODAY)

    assert errors == ["payload: Unsupported configuration schema version 42"]


def test_main_reports_each_file(tmp_path, capsys) -> None:
    good = tmp_path / "good.json"
    good.write_text(
        json.dumps({"fiscalYearStartDate": "2024-07-28", "sprintLengthWeeks": 3, "theme": "cool"})
    )
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"fiscalYearStartDate": "2024-07-28", "sprintLengthWeeks": 6}))
    broken = tmp_path / "broken.json"
    broken.write_text("{")

    assert main([str(good)]) == 0
    assert main([str(good), str(bad), str(broken)]) == 1

    output = capsys.readouterr().out
    assert f"[{good}] OK" in output
    assert f"[{bad}] 1 issue(s) detected:" in output
    assert f"[{broken}] failed to load configuration" in output


def test_main_reports_version(capsys, monkeypatch) -> None:
    monkeypatch.setattr(validator_module, "get_project_version", lambda: "1.2.3")

    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])

    assert excinfo.value.code == 0
    assert "1.2.3" in capsys.readouterr().out
