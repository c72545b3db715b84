"""JSON file backend for the record store.

This module owns the raw bytes of one dataset file. It decodes them into
a list of records, initializes missing or blank files with an empty array,
and writes the full dataset back on every persist.
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from pathlib import Path

from core.config import StoreConfig
from core.constants import STORE_ENCODING, TEMP_FILE_SUFFIX
from core.errors import (
    CorruptedStoreError,
    InvalidArgumentError,
    MalformedEncodingError,
    StoreIOError,
)
from core.logging_config import get_logger
from core.types import Dataset
from store.record_validation import require_location

_LOGGER = get_logger(__name__)


class JsonFileBackend:
    """Filesystem-backed dataset storage.

    The backend is bound to one resolved path at construction time and
    performs no I/O until the first load or persist.
    """

    def __init__(self, location: str | os.PathLike[str], config: StoreConfig | None = None) -> None:
        """Bind the backend to a file location.

        Args:
            location: Path of the JSON dataset file.
            config: Optional runtime configuration.

        Raises:
            InvalidArgumentError: If location is empty or not path-like.
        """
        self._path = require_location(location)
        self._config = config or StoreConfig()

    @property
    def path(self) -> Path:
        """Resolved absolute path of the dataset file."""
        return self._path

    def load(self) -> Dataset:
        """Read and decode the dataset file.

        Missing and blank files are initialized with an empty array.

        Returns:
            Records in stored order.

        Raises:
            MalformedEncodingError: If content is not valid JSON.
            CorruptedStoreError: If content is not a JSON array.
            StoreIOError: If the file cannot be read.
        """
        try:
            raw_content = self._path.read_bytes()
        except FileNotFoundError:
            return self._initialize()
        except OSError as error:
            _LOGGER.error("store_read_failed", path=str(self._path), detail=str(error))
            raise StoreIOError(
                f"Failed to read database at {self._path}: {error}. "
                "Check file permissions and retry."
            ) from error
        try:
            content = raw_content.decode(STORE_ENCODING)
        except UnicodeDecodeError as error:
            raise self._malformed(error) from error
        if not content.strip():
            return self._initialize()
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as error:
            raise self._malformed(error) from error
        if not isinstance(payload, list):
            _LOGGER.error(
                "store_corrupted",
                path=str(self._path),
                top_level_type=type(payload).__name__,
            )
            raise CorruptedStoreError(
                f"Database content at {self._path} is corrupted. Expected an array. "
                "Fix or remove the file and retry."
            )
        return payload

    def persist(self, dataset: Dataset) -> None:
        """Encode and write the full dataset, replacing prior content.

        Args:
            dataset: Records to store.

        Raises:
            InvalidArgumentError: If dataset is not a list.
            StoreIOError: If the file cannot be written.
        """
        if not isinstance(dataset, list):
            raise InvalidArgumentError(
                f"Data must be a list of records, got {type(dataset).__name__}."
            )
        encoded = json.dumps(dataset, indent=self._config.json_indent, ensure_ascii=False) + "\n"
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            if self._config.atomic_writes:
                _write_atomic(self._path, encoded)
            else:
                self._path.write_text(encoded, encoding=STORE_ENCODING)
        except OSError as error:
            _LOGGER.error("store_write_failed", path=str(self._path), detail=str(error))
            raise StoreIOError(
                f"Failed to save data to {self._path}: {error}. "
                "Check free space and file permissions, then retry."
            ) from error

    def _initialize(self) -> Dataset:
        dataset: Dataset = []
        self.persist(dataset)
        _LOGGER.info("store_initialized", path=str(self._path))
        return dataset

    def _malformed(self, error: ValueError) -> MalformedEncodingError:
        _LOGGER.error("store_decode_failed", path=str(self._path), detail=str(error))
        return MalformedEncodingError(
            f"Database file contains invalid JSON: {self._path}. "
            "Fix or remove the file and retry."
        )


def _write_atomic(target_path: Path, encoded: str) -> None:
    """Write through a uniquely named sibling temp file so the target is never half-written."""
    handle_fd, temp_name = tempfile.mkstemp(
        dir=target_path.parent,
        prefix=target_path.name + ".",
        suffix=TEMP_FILE_SUFFIX,
    )
    temp_path = Path(temp_name)
    try:
        with os.fdopen(handle_fd, "w", encoding=STORE_ENCODING) as handle:
            if target_path.exists():
                shutil.copymode(target_path, temp_path)
            handle.write(encoded)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_path, target_path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise
