"""Per-location serialization of load-mutate-persist sequences.

The record engine holds no lock by default: concurrent callers against one
file can lose each other's writes. Attaching a LocationGate makes every
operation on the same resolved path run one at a time within this process.
It does not coordinate separate processes.

Locks are registered weakly: a path's lock lives as long as some gate for
that path does, and is dropped from the registry afterwards.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
import threading
from typing import Iterator
import weakref

_REGISTRY_LOCK = threading.Lock()
_LOCATION_LOCKS: weakref.WeakValueDictionary[Path, threading.RLock] = (
    weakref.WeakValueDictionary()
)


class LocationGate:
    """Re-entrant mutual-exclusion gate shared by all users of one path."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = _lock_for(path)

    @property
    def path(self) -> Path:
        return self._path

    @contextmanager
    def hold(self) -> Iterator[None]:
        """Hold the gate for the duration of the with-block."""
        with self._lock:
            yield


def _lock_for(path: Path) -> threading.RLock:
    with _REGISTRY_LOCK:
        lock = _LOCATION_LOCKS.get(path)
        if lock is None:
            lock = threading.RLock()
            _LOCATION_LOCKS[path] = lock
        return lock
