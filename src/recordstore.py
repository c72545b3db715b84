"""Public SDK surface for recordstore.

This module provides a stable import path for library users.
It wires a JSON file backend to a record engine and re-exports the errors.
"""

from __future__ import annotations

import os

from core.config import StoreConfig, load_store_config
from core.errors import (
    CorruptedStoreError,
    IdConflictError,
    InvalidArgumentError,
    MalformedEncodingError,
    RecordNotFoundError,
    RecordStoreError,
    StoreConfigError,
    StoreIOError,
)
from core.logging_config import configure_logging
from core.types import Dataset, Record, RecordBackend
from store.json_backend import JsonFileBackend
from store.location_gate import LocationGate
from store.record_engine import RecordEngine

__all__ = [
    "CorruptedStoreError",
    "Dataset",
    "IdConflictError",
    "InvalidArgumentError",
    "JsonFileBackend",
    "MalformedEncodingError",
    "Record",
    "RecordBackend",
    "RecordEngine",
    "RecordNotFoundError",
    "RecordStoreError",
    "StoreConfig",
    "StoreConfigError",
    "StoreIOError",
    "load_store_config",
    "open_database",
]


def open_database(
    location: str | os.PathLike[str],
    config: StoreConfig | None = None,
) -> RecordEngine:
    """Open a record engine bound to one JSON file.

    No file is read or written until the first operation. Global structlog
    configuration is only replaced when config.log_level is set.

    Args:
        location: Path of the JSON dataset file.
        config: Optional runtime configuration; defaults apply when omitted.

    Returns:
        Record engine for the file.

    Raises:
        InvalidArgumentError: If location is empty or not path-like.
    """
    resolved_config = config or StoreConfig()
    if resolved_config.log_level is not None:
        configure_logging(resolved_config.log_level)
    backend = JsonFileBackend(location, resolved_config)
    gate = LocationGate(backend.path) if resolved_config.serialize_operations else None
    return RecordEngine(backend, gate)
