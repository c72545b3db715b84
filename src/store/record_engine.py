"""Record engine: CRUD over a fully reloaded dataset.

Each operation loads the dataset fresh from the backend, computes its
result in memory and, when it mutates, persists the whole dataset back.
Nothing is cached between calls, so the file is always the source of truth.

Identifiers are derived as one more than the largest id currently stored.
Removing the highest record therefore frees its id for the next create.

Concurrency: without a gate, callers must ensure a single writer per file.
Two racing creates can derive the same id and one insert will be lost.
"""

from __future__ import annotations

from contextlib import nullcontext
from typing import ContextManager, Mapping

from core.constants import ID_FIELD
from core.errors import IdConflictError, RecordNotFoundError
from core.logging_config import get_logger
from core.types import Dataset, Record, RecordBackend
from store.location_gate import LocationGate
from store.record_validation import record_id_of, require_payload, require_record_id

_LOGGER = get_logger(__name__)


class RecordEngine:
    """Create, read, update and remove records with auto-assigned ids."""

    def __init__(self, backend: RecordBackend, gate: LocationGate | None = None) -> None:
        """Create an engine over a backend.

        Args:
            backend: Dataset storage.
            gate: Optional lock held around each full operation.
        """
        self._backend = backend
        self._gate = gate

    def create(self, payload: Mapping[str, object]) -> Record:
        """Append a new record with the next free id.

        Any id field in the payload is discarded.

        Args:
            payload: Field values for the new record.

        Returns:
            The stored record, including its assigned id.

        Raises:
            InvalidArgumentError: If payload is not a JSON-serializable mapping.
            IdConflictError: If the derived id is already taken.
        """
        fields = require_payload(payload)
        fields.pop(ID_FIELD, None)
        with self._hold():
            dataset = self._backend.load()
            record_id = next_record_id(dataset)
            if _find_index(dataset, record_id) is not None:
                raise IdConflictError(
                    f"ID conflict: An item with ID {record_id} already exists."
                )
            record: Record = {ID_FIELD: record_id, **fields}
            dataset.append(record)
            self._backend.persist(dataset)
        _LOGGER.debug("record_created", record_id=record_id)
        return record

    def get_all(self) -> Dataset:
        """Return every stored record in insertion order."""
        with self._hold():
            return self._backend.load()

    def get_by_id(self, record_id: int) -> Record | None:
        """Return the record with the given id, or None when absent.

        Raises:
            InvalidArgumentError: If record_id is not a positive integer.
        """
        record_id = require_record_id(record_id)
        with self._hold():
            dataset = self._backend.load()
        index = _find_index(dataset, record_id)
        return None if index is None else dataset[index]

    def update(self, record_id: int, payload: Mapping[str, object]) -> Record:
        """Shallow-merge payload fields into an existing record.

        The record keeps its id and its position in the dataset.

        Args:
            record_id: Id of the record to update.
            payload: Fields to add or overwrite.

        Returns:
            The merged record.

        Raises:
            InvalidArgumentError: If record_id or payload is malformed.
            RecordNotFoundError: If no record has record_id.
        """
        record_id = require_record_id(record_id)
        fields = require_payload(payload)
        with self._hold():
            dataset = self._backend.load()
            index = _require_index(dataset, record_id)
            updated: Record = {**dataset[index], **fields, ID_FIELD: record_id}
            dataset[index] = updated
            self._backend.persist(dataset)
        _LOGGER.debug("record_updated", record_id=record_id, fields=sorted(fields))
        return updated

    def remove(self, record_id: int) -> Record:
        """Delete a record and return its last stored state.

        Raises:
            InvalidArgumentError: If record_id is not a positive integer.
            RecordNotFoundError: If no record has record_id.
        """
        record_id = require_record_id(record_id)
        with self._hold():
            dataset = self._backend.load()
            index = _require_index(dataset, record_id)
            removed = dataset.pop(index)
            self._backend.persist(dataset)
        _LOGGER.debug("record_removed", record_id=record_id)
        return removed

    def _hold(self) -> ContextManager[None]:
        return self._gate.hold() if self._gate is not None else nullcontext()


def next_record_id(dataset: Dataset) -> int:
    """Derive the next id as one more than the largest stored id."""
    return max((record_id_of(record) for record in dataset), default=0) + 1


def _find_index(dataset: Dataset, record_id: int) -> int | None:
    for index, record in enumerate(dataset):
        if record_id_of(record) == record_id:
            return index
    return None


def _require_index(dataset: Dataset, record_id: int) -> int:
    index = _find_index(dataset, record_id)
    if index is None:
        raise RecordNotFoundError(f"Item with ID {record_id} does not exist.")
    return index
