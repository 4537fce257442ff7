"""Versioned migrations for stored fiscal configuration payloads.

Stored payloads have gone through three shapes:

* **v1** anchored the fiscal year on a month (``fiscalYearStartMonth``).
* **v2** replaced the month with a full ``fiscalYearStartDate`` and added the
  optional ``firstSprintDate`` sprint anchor.
* **v3** added the display ``theme``.

Migrations run exactly once, when the store loads a payload, and always leave
``schemaVersion`` set to :data:`CURRENT_SCHEMA_VERSION`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import date
from typing import Any

from .schema import ConfigDefaults, ConfigurationError

_LOGGER = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = 3
SCHEMA_VERSION_KEY = "schemaVersion"

MigrationStep = Callable[[dict[str, Any], date, ConfigDefaults], dict[str, Any]]


def _migrate_v1_to_v2(
    payload: dict[str, Any], today: date, defaults: ConfigDefaults
) -> dict[str, Any]:
    month = payload.pop("fiscalYearStartMonth", None)
    if payload.get("fiscalYearStartDate"):
        return payload

    try:
        month_number = int(month)
    except (TypeError, ValueError, OverflowError):
        month_number = 0

    if 1 <= month_number <= 12:
        payload["fiscalYearStartDate"] = date(today.year, month_number, 1).isoformat()
    else:
        _LOGGER.warning("Dropping invalid legacy fiscal start month: %r", month)
    return payload


def _migrate_v2_to_v3(
    payload: dict[str, Any], today: date, defaults: ConfigDefaults
) -> dict[str, Any]:
    payload.setdefault("theme", defaults.theme.value)
    return payload


MIGRATIONS: Mapping[int, MigrationStep] = {
    1: _migrate_v1_to_v2,
    2: _migrate_v2_to_v3,
}


def detect_schema_version(payload: Mapping[str, Any]) -> int:
    """Return the schema version of ``payload``.

    An explicit ``schemaVersion`` wins; otherwise the version is inferred from
    the keys present, as payloads written before versioning carry none.
    """

    explicit = payload.get(SCHEMA_VERSION_KEY)
    if explicit is not None:
        try:
            return int(explicit)
        except (TypeError, ValueError, OverflowError) as error:
            raise ConfigurationError(
                f"Stored schema version must be an integer, found {explicit!r}"
            ) from error

    if payload.get("fiscalYearStartMonth") and not payload.get("fiscalYearStartDate"):
        return 1
    if "theme" not in payload:
        return 2
    return CURRENT_SCHEMA_VERSION


def migrate_payload(
    payload: Mapping[str, Any], *, today: date, defaults: ConfigDefaults
) -> dict[str, Any]:
    """Upgrade ``payload`` to :data:`CURRENT_SCHEMA_VERSION`.

    ``today`` supplies the calendar year for migrations that need one.
    """

    version = detect_schema_version(payload)
    if version < 1 or version > CURRENT_SCHEMA_VERSION:
        raise ConfigurationError(f"Unsupported configuration schema version {version}")

    migrated = dict(payload)
    migrated.pop(SCHEMA_VERSION_KEY, None)
    starting_version = version

    while version < CURRENT_SCHEMA_VERSION:
        migrated = MIGRATIONS[version](migrated, today, defaults)
        version += 1

    if starting_version != version:
        _LOGGER.info(
            "Migrated stored fiscal configuration from schema v%s to v%s",
            starting_version,
            version,
        )

    migrated[SCHEMA_VERSION_KEY] = version
    return migrated


__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "MIGRATIONS",
    "SCHEMA_VERSION_KEY",
    "detect_schema_version",
    "migrate_payload",
]
