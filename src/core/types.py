"""Shared typed models.

Records are open JSON objects with one reserved integer key, so they are
plain dictionaries rather than dataclasses. This module names those shapes
and the backend contract the record engine depends on.
"""

from __future__ import annotations

from typing import Any, Protocol

Record = dict[str, Any]
Dataset = list[Record]


class RecordBackend(Protocol):
    """Durable storage contract consumed by the record engine."""

    def load(self) -> Dataset:
        """Return the full dataset, initializing empty storage if needed."""
        ...

    def persist(self, dataset: Dataset) -> None:
        """Replace stored content with the given dataset."""
        ...
