"""Runtime configuration model for recordstore.

This module owns all environment variable and config file parsing.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
import os
from pathlib import Path
from typing import Mapping, cast

import yaml

from core.constants import (
    DEFAULT_ATOMIC_WRITES,
    DEFAULT_JSON_INDENT,
    DEFAULT_SERIALIZE_OPERATIONS,
    ENV_ATOMIC_WRITES,
    ENV_JSON_INDENT,
    ENV_LOG_LEVEL,
    ENV_SERIALIZE_OPERATIONS,
    FALSE_VALUES,
    SUPPORTED_LOG_LEVELS,
    TRUE_VALUES,
)
from core.errors import StoreConfigError


@dataclass(frozen=True)
class StoreConfig:
    """Validated runtime configuration.

    Attributes:
        json_indent: Indentation width used when writing the store file.
        atomic_writes: Write through a temporary file and rename over the target.
        serialize_operations: Hold a per-location lock around each operation.
        log_level: Minimum structured log level to install, or None to leave
            the host application's structlog configuration untouched.
    """

    json_indent: int = DEFAULT_JSON_INDENT
    atomic_writes: bool = DEFAULT_ATOMIC_WRITES
    serialize_operations: bool = DEFAULT_SERIALIZE_OPERATIONS
    log_level: str | None = None

    @classmethod
    def from_env(cls) -> "StoreConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            StoreConfigError: If environment values are invalid.
        """
        return cls(
            json_indent=_parse_indent(
                os.getenv(ENV_JSON_INDENT, str(DEFAULT_JSON_INDENT)), ENV_JSON_INDENT
            ),
            atomic_writes=_parse_flag(
                os.getenv(ENV_ATOMIC_WRITES), DEFAULT_ATOMIC_WRITES, ENV_ATOMIC_WRITES
            ),
            serialize_operations=_parse_flag(
                os.getenv(ENV_SERIALIZE_OPERATIONS),
                DEFAULT_SERIALIZE_OPERATIONS,
                ENV_SERIALIZE_OPERATIONS,
            ),
            log_level=_parse_optional_log_level(os.getenv(ENV_LOG_LEVEL), ENV_LOG_LEVEL),
        )


def load_store_config(config_path: str) -> StoreConfig:
    """Load and validate a YAML config file.

    Args:
        config_path: File path to a YAML mapping of StoreConfig fields.

    Returns:
        Validated config; omitted fields keep their defaults.

    Raises:
        StoreConfigError: If the file is missing, unreadable, or invalid.
    """
    config_file = Path(config_path).expanduser().resolve()
    if not config_file.exists():
        raise StoreConfigError(
            f"Config file does not exist at {config_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(config_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise StoreConfigError(
            f"Failed to read config at {config_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise StoreConfigError(
            f"Failed to parse YAML config at {config_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise StoreConfigError(f"Config at {config_file} is empty. Define at least one field.")
    if not isinstance(payload, Mapping):
        raise StoreConfigError(
            f"Config at {config_file} must be a YAML mapping of field names to values."
        )
    return _config_from_mapping(payload, str(config_file))


def _config_from_mapping(payload: Mapping[object, object], source: str) -> StoreConfig:
    known_fields = {field.name for field in fields(StoreConfig)}
    unknown_keys = sorted(str(key) for key in payload if key not in known_fields)
    if unknown_keys:
        raise StoreConfigError(
            f"Unknown config keys in {source}: {', '.join(unknown_keys)}. "
            f"Supported keys: {', '.join(sorted(known_fields))}."
        )
    defaults = StoreConfig()
    json_indent = payload.get("json_indent", defaults.json_indent)
    if isinstance(json_indent, bool) or not isinstance(json_indent, int) or json_indent < 0:
        raise StoreConfigError(
            f"Invalid json_indent in {source}: expected non-negative integer, got {json_indent!r}."
        )
    atomic_writes = payload.get("atomic_writes", defaults.atomic_writes)
    serialize_operations = payload.get("serialize_operations", defaults.serialize_operations)
    for key, value in (
        ("atomic_writes", atomic_writes),
        ("serialize_operations", serialize_operations),
    ):
        if not isinstance(value, bool):
            raise StoreConfigError(
                f"Invalid {key} in {source}: expected true or false, got {value!r}."
            )
    log_level = payload.get("log_level")
    return StoreConfig(
        json_indent=json_indent,
        atomic_writes=cast(bool, atomic_writes),
        serialize_operations=cast(bool, serialize_operations),
        log_level=_parse_optional_log_level(
            None if log_level is None else str(log_level), f"log_level in {source}"
        ),
    )


def _parse_indent(raw_value: str, source: str) -> int:
    """Parse an indentation width.

    Args:
        raw_value: Raw string from environment.
        source: Name of the setting, for error messages.

    Returns:
        Parsed non-negative integer.

    Raises:
        StoreConfigError: If value is not a non-negative integer.
    """
    try:
        indent = int(raw_value)
    except ValueError as error:
        raise StoreConfigError(
            f"Invalid {source} value: expected integer, got '{raw_value}'. "
            f"Set {source} to a non-negative number."
        ) from error
    if indent < 0:
        raise StoreConfigError(
            f"Invalid {source} value: expected non-negative integer, got '{raw_value}'."
        )
    return indent


def _parse_flag(raw_value: str | None, default: bool, source: str) -> bool:
    if raw_value is None:
        return default
    normalized = raw_value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise StoreConfigError(
        f"Invalid {source} value: expected one of "
        f"{', '.join(TRUE_VALUES + FALSE_VALUES)}, got '{raw_value}'."
    )


def _parse_log_level(raw_value: str, source: str) -> str:
    normalized = raw_value.strip().lower()
    if normalized not in SUPPORTED_LOG_LEVELS:
        raise StoreConfigError(
            f"Invalid {source} value: expected one of "
            f"{', '.join(SUPPORTED_LOG_LEVELS)}, got '{raw_value}'."
        )
    return normalized


def _parse_optional_log_level(raw_value: str | None, source: str) -> str | None:
    if raw_value is None:
        return None
    return _parse_log_level(raw_value, source)
