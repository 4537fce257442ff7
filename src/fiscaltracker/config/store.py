"""Load, migrate and persist fiscal configuration through a key-value backend."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any, Protocol

import yaml
from pydantic import ValidationError

from .migrations import CURRENT_SCHEMA_VERSION, SCHEMA_VERSION_KEY, migrate_payload
from .schema import ConfigDefaults, ConfigurationError, FiscalConfig, Theme, parse_calendar_date

_LOGGER = logging.getLogger(__name__)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
DEFAULTS_FILE = CONFIG_DIRECTORY / "defaults.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_defaults() -> ConfigDefaults:
    """Load and cache the packaged configuration defaults."""

    if not DEFAULTS_FILE.exists():
        raise FileNotFoundError("Configuration defaults file not found")

    try:
        return ConfigDefaults.model_validate(_load_yaml(DEFAULTS_FILE))
    except ValidationError as error:
        raise ConfigurationError(f"Defaults validation failed: {error}") from error


class KeyValueStore(Protocol):
    """Minimal string key-value persistence, modelled on browser local storage."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Dictionary-backed :class:`KeyValueStore` for tests and embedding."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


def default_config(today: date | None = None) -> FiscalConfig:
    """Return the packaged default configuration anchored in ``today``'s year."""

    defaults = load_defaults()
    today = today or date.today()
    return FiscalConfig(
        fiscal_year_start_date=defaults.fiscal_year_start.in_year(today.year),
        sprint_length_weeks=defaults.sprint_length_weeks,
        theme=defaults.theme,
    )


def _stored_date(payload: Mapping[str, Any], key: str) -> date | None:
    raw_value = payload.get(key)
    parsed = parse_calendar_date(raw_value)
    if parsed is None and raw_value not in (None, ""):
        _LOGGER.warning("Discarding invalid stored %s: %r", key, raw_value)
    return parsed


def _stored_sprint_length(payload: Mapping[str, Any], fallback: int) -> int | float:
    value = payload.get("sprintLengthWeeks")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return fallback
    try:
        finite = math.isfinite(value)
    except OverflowError:
        finite = False
    if not finite or value <= 0:
        _LOGGER.warning("Discarding unusable stored sprint length: %r", value)
        return fallback
    return int(value) if float(value).is_integer() else value


def _stored_theme(payload: Mapping[str, Any], fallback: Theme) -> Theme:
    try:
        return Theme(payload.get("theme"))
    except ValueError:
        return fallback


def parse_config(payload: Any, *, today: date | None = None) -> FiscalConfig:
    """Build a :class:`FiscalConfig` from a stored JSON ``payload``.

    The payload is migrated to the current schema first. Stored dates are
    revalidated: an unreadable fiscal year start falls back to the packaged
    default anchor in ``today``'s year, and an unreadable first sprint date is
    dropped.
    """

    if not isinstance(payload, Mapping):
        raise ConfigurationError("Stored configuration must be a JSON object")

    defaults = load_defaults()
    today = today or date.today()
    migrated = migrate_payload(payload, today=today, defaults=defaults)

    start_date = _stored_date(migrated, "fiscalYearStartDate")
    if start_date is None:
        start_date = defaults.fiscal_year_start.in_year(today.year)

    return FiscalConfig(
        fiscal_year_start_date=start_date,
        sprint_length_weeks=_stored_sprint_length(migrated, defaults.sprint_length_weeks),
        theme=_stored_theme(migrated, defaults.theme),
        first_sprint_date=_stored_date(migrated, "firstSprintDate"),
    )


def serialize_config(config: FiscalConfig) -> dict[str, Any]:
    """Return a JSON-ready mapping that :func:`parse_config` reads back unchanged."""

    payload = config.model_dump(mode="json", by_alias=True, exclude_none=True)
    payload[SCHEMA_VERSION_KEY] = CURRENT_SCHEMA_VERSION
    return payload


class ConfigStore:
    """Persist :class:`FiscalConfig` values under a single storage key."""

    def __init__(self, backend: KeyValueStore, key: str | None = None) -> None:
        self._backend = backend
        self._key = key or load_defaults().storage_key

    @property
    def key(self) -> str:
        return self._key

    def load(self, today: date | None = None) -> FiscalConfig:
        """Return the stored configuration, or the defaults when none is usable."""

        raw_value = self._backend.get_item(self._key)
        if raw_value is None:
            return default_config(today)

        try:
            payload = json.loads(raw_value)
        except json.JSONDecodeError as error:
            _LOGGER.error("Error loading saved config: %s", error)
            return default_config(today)

        try:
            return parse_config(payload, today=today)
        except ConfigurationError as error:
            _LOGGER.error("Error loading saved config: %s", error)
            return default_config(today)

    def save(self, config: FiscalConfig) -> None:
        self._backend.set_item(self._key, json.dumps(serialize_config(config)))

    def clear(self) -> None:
        self._backend.remove_item(self._key)


__all__ = [
    "CONFIG_DIRECTORY",
    "ConfigStore",
    "DEFAULTS_FILE",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "default_config",
    "load_defaults",
    "parse_config",
    "serialize_config",
]
