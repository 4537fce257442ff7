"""Fiscal configuration schema, persistence and validation."""

from .migrations import CURRENT_SCHEMA_VERSION, detect_schema_version, migrate_payload
from .schema import ConfigurationError, FiscalConfig, Theme, parse_calendar_date
from .store import (
    ConfigStore,
    InMemoryKeyValueStore,
    KeyValueStore,
    default_config,
    load_defaults,
    parse_config,
    serialize_config,
)
from .validator import validate_configuration, validate_stored_payload

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "ConfigStore",
    "ConfigurationError",
    "FiscalConfig",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "Theme",
    "default_config",
    "detect_schema_version",
    "load_defaults",
    "migrate_payload",
    "parse_calendar_date",
    "parse_config",
    "serialize_config",
    "validate_configuration",
    "validate_stored_payload",
]
