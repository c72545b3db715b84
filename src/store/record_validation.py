"""Argument checks for record engine operations.

Every check here runs before the backing file is touched, so a rejected
call never reads or writes storage.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping, cast

from core.constants import ID_FIELD
from core.errors import InvalidArgumentError


def require_record_id(record_id: object) -> int:
    """Validate a caller-supplied record id.

    Args:
        record_id: Candidate id.

    Returns:
        The id as a positive integer.

    Raises:
        InvalidArgumentError: If the id is not a positive integer.
    """
    if not is_record_id(record_id):
        raise InvalidArgumentError(f"ID must be a positive integer, got {record_id!r}.")
    return cast(int, record_id)


def require_payload(payload: object) -> dict[str, Any]:
    """Validate a create or update payload.

    Field names must be strings at every nesting level, since JSON object
    keys are strings and coercing them could merge two distinct fields.

    Args:
        payload: Candidate mapping of field values.

    Returns:
        A copy of the payload in the form it will be stored, e.g. tuples
        become lists.

    Raises:
        InvalidArgumentError: If payload is not a JSON-serializable mapping
            with string field names.
    """
    if not isinstance(payload, Mapping):
        raise InvalidArgumentError(
            f"Payload must be a mapping of field names to values, got {type(payload).__name__}."
        )
    try:
        encoded = json.dumps(dict(payload), allow_nan=False)
    except (TypeError, ValueError) as error:
        raise InvalidArgumentError(
            f"Payload must contain only JSON-serializable values: {error}."
        ) from error
    _require_string_keys(payload)
    return cast(dict[str, Any], json.loads(encoded))


def _require_string_keys(value: object) -> None:
    if isinstance(value, Mapping):
        for key, item in value.items():
            if not isinstance(key, str):
                raise InvalidArgumentError(
                    f"Field names must be strings, got {key!r} ({type(key).__name__})."
                )
            _require_string_keys(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _require_string_keys(item)


def require_location(location: object) -> Path:
    """Validate and resolve a store file location.

    Args:
        location: String or path-like file location.

    Returns:
        Absolute resolved path.

    Raises:
        InvalidArgumentError: If location is empty or not path-like.
    """
    if isinstance(location, os.PathLike):
        location = os.fspath(location)
    if not isinstance(location, str) or not location.strip():
        raise InvalidArgumentError(
            "Database file path must be a valid non-empty string or path-like object."
        )
    return Path(location).expanduser().resolve()


def is_record_id(value: object) -> bool:
    """Return whether a value is usable as a record id."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def record_id_of(record: object) -> int:
    """Return a stored record's id, or 0 when absent or unusable."""
    if not isinstance(record, dict):
        return 0
    value = record.get(ID_FIELD)
    return value if is_record_id(value) else 0
