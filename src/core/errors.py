"""Recordstore exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Validation errors are raised before any storage access; storage errors
wrap the underlying cause so callers can tell bad bytes from bad shape.
"""

from __future__ import annotations


class RecordStoreError(Exception):
    """Base exception for all recordstore failures."""


class StoreConfigError(RecordStoreError):
    """Raised for invalid runtime configuration."""


class InvalidArgumentError(RecordStoreError):
    """Raised for malformed ids, non-mapping payloads, or bad locations."""


class MalformedEncodingError(RecordStoreError):
    """Raised when backing content exists but is not valid JSON."""


class CorruptedStoreError(RecordStoreError):
    """Raised when backing content decodes to something other than an array."""


class RecordNotFoundError(RecordStoreError):
    """Raised when update or remove targets an id that does not exist."""


class IdConflictError(RecordStoreError):
    """Raised when a freshly derived id is already taken."""


class StoreIOError(RecordStoreError):
    """Raised when the backing file cannot be read or written."""
