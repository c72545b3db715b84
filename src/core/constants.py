"""Core constants used across recordstore modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

ID_FIELD = "id"
STORE_ENCODING = "utf-8"
TEMP_FILE_SUFFIX = ".tmp"
DEFAULT_JSON_INDENT = 2
DEFAULT_ATOMIC_WRITES = True
DEFAULT_SERIALIZE_OPERATIONS = False
DEFAULT_LOG_LEVEL = "info"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")
ENV_JSON_INDENT = "RECORDSTORE_JSON_INDENT"
ENV_ATOMIC_WRITES = "RECORDSTORE_ATOMIC_WRITES"
ENV_SERIALIZE_OPERATIONS = "RECORDSTORE_SERIALIZE_OPERATIONS"
ENV_LOG_LEVEL = "RECORDSTORE_LOG_LEVEL"
TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")
