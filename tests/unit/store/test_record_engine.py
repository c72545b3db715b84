"""Unit tests for record engine CRUD operations."""

from __future__ import annotations

import pytest

from core.errors import (
    CorruptedStoreError,
    InvalidArgumentError,
    RecordNotFoundError,
    StoreIOError,
)
from core.types import Dataset
from store.json_backend import JsonFileBackend
from store.record_engine import RecordEngine, next_record_id


class _FailingPersistBackend:
    """Backend whose reads succeed and whose writes always fail."""

    def __init__(self, dataset: Dataset) -> None:
        self._dataset = dataset
        self.persist_calls = 0

    def load(self) -> Dataset:
        return [dict(record) for record in self._dataset]

    def persist(self, dataset: Dataset) -> None:
        self.persist_calls += 1
        raise StoreIOError("disk full")


def _engine(store_path) -> RecordEngine:
    return RecordEngine(JsonFileBackend(store_path))


def _seeded_engine(store_path, dataset: Dataset) -> RecordEngine:
    backend = JsonFileBackend(store_path)
    backend.persist(dataset)
    return RecordEngine(backend)


def test_create_assigns_increasing_ids_from_empty(store_path) -> None:
    """First two creates on a fresh store should get ids 1 and 2."""
    engine = _engine(store_path)

    first = engine.create({"a": 1})
    second = engine.create({"b": 2})

    assert first == {"id": 1, "a": 1} and second == {"id": 2, "b": 2}


def test_create_discards_payload_id(store_path) -> None:
    """A caller-supplied id should be replaced by the derived id."""
    engine = _engine(store_path)

    record = engine.create({"id": 500, "name": "A"})

    assert record == {"id": 1, "name": "A"} and list(record) == ["id", "name"]


def test_create_persists_record(store_path) -> None:
    """Created records should be visible to a fresh engine on the same file."""
    _engine(store_path).create({"name": "A"})

    records = _engine(store_path).get_all()

    assert records == [{"id": 1, "name": "A"}]


def test_create_reuses_id_after_removing_highest(store_path) -> None:
    """Removing the highest id should free it for the next create."""
    engine = _engine(store_path)
    engine.create({"a": 1})
    engine.create({"b": 2})
    engine.remove(2)

    record = engine.create({"x": 1})

    assert record["id"] == 2


def test_create_uses_max_id_not_count(store_path) -> None:
    """Derived id should follow the largest stored id, not the record count."""
    engine = _seeded_engine(store_path, [{"id": 7, "a": 1}, {"id": 3, "b": 2}])

    record = engine.create({"c": 3})

    assert record["id"] == 8


def test_next_record_id_ignores_unusable_ids() -> None:
    """Missing, boolean, and non-integer ids should count as zero."""
    dataset = [{"name": "no id"}, {"id": True}, {"id": "9"}, {"id": 2.5}, {"id": 2}]

    assert next_record_id(dataset) == 3


def test_get_all_returns_empty_for_fresh_store(store_path) -> None:
    """get_all on a missing file should return an empty list."""
    engine = _engine(store_path)

    assert engine.get_all() == [] and store_path.exists()


def test_get_by_id_returns_matching_record(store_path) -> None:
    """get_by_id should return the first record with the id."""
    engine = _seeded_engine(store_path, [{"id": 1, "a": 1}, {"id": 2, "b": 2}])

    assert engine.get_by_id(2) == {"id": 2, "b": 2}


def test_get_by_id_returns_none_when_absent(store_path) -> None:
    """A missing id is a normal query result, not an error."""
    engine = _seeded_engine(store_path, [{"id": 1}])

    assert engine.get_by_id(77) is None


def test_update_merges_fields_and_keeps_id(store_path) -> None:
    """Update should override given fields and keep the rest."""
    engine = _seeded_engine(store_path, [{"id": 3, "name": "A", "age": 10}])

    updated = engine.update(3, {"age": 11})

    assert updated == {"id": 3, "name": "A", "age": 11} and engine.get_by_id(3) == updated


def test_update_ignores_payload_id(store_path) -> None:
    """A payload id should never change the stored id."""
    engine = _seeded_engine(store_path, [{"id": 3, "age": 10}])

    updated = engine.update(3, {"id": 999, "age": 12})

    assert updated == {"id": 3, "age": 12} and engine.get_by_id(999) is None


def test_update_keeps_record_position(store_path) -> None:
    """Updated records should stay at their original index."""
    engine = _seeded_engine(store_path, [{"id": 1}, {"id": 2}, {"id": 3}])

    engine.update(2, {"flag": True})

    assert [record["id"] for record in engine.get_all()] == [1, 2, 3]


def test_update_raises_for_missing_id(store_path) -> None:
    """Update of an unknown id should fail with RecordNotFoundError."""
    engine = _seeded_engine(store_path, [{"id": 1}])
    before = store_path.read_bytes()

    with pytest.raises(RecordNotFoundError):
        engine.update(77, {"a": 1})

    assert store_path.read_bytes() == before


def test_remove_returns_snapshot_and_keeps_order(store_path) -> None:
    """Remove should return the removed record and keep other records in order."""
    engine = _seeded_engine(store_path, [{"id": 1}, {"id": 2, "name": "B"}, {"id": 3}])

    removed = engine.remove(2)

    assert removed == {"id": 2, "name": "B"} and engine.get_all() == [{"id": 1}, {"id": 3}]


def test_remove_raises_for_missing_id(store_path) -> None:
    """Remove of an unknown id should fail with RecordNotFoundError."""
    engine = _seeded_engine(store_path, [{"id": 1}])

    with pytest.raises(RecordNotFoundError):
        engine.remove(77)

    assert engine.get_all() == [{"id": 1}]


@pytest.mark.parametrize(
    "call",
    [
        lambda engine: engine.create([]),
        lambda engine: engine.create(None),
        lambda engine: engine.create("text"),
        lambda engine: engine.create({"value": float("nan")}),
        lambda engine: engine.create({"value": object()}),
        lambda engine: engine.create({1: "a"}),
        lambda engine: engine.create({1: "x", "1": "y"}),
        lambda engine: engine.create({"nested": {None: True}}),
        lambda engine: engine.update(1, {True: "flag"}),
        lambda engine: engine.get_by_id(0),
        lambda engine: engine.get_by_id(-1),
        lambda engine: engine.get_by_id(1.5),
        lambda engine: engine.get_by_id(True),
        lambda engine: engine.get_by_id("1"),
        lambda engine: engine.update(0, {"a": 1}),
        lambda engine: engine.update(1, ["a"]),
        lambda engine: engine.remove(-3),
    ],
)
def test_invalid_arguments_leave_store_untouched(store_path, call) -> None:
    """Malformed ids and payloads should fail before any storage access."""
    engine = _seeded_engine(store_path, [{"id": 1, "a": 1}])
    before = store_path.read_bytes()

    with pytest.raises(InvalidArgumentError):
        call(engine)

    assert store_path.read_bytes() == before


def test_invalid_arguments_do_not_initialize_missing_store(store_path) -> None:
    """A rejected call on a fresh location should not create the file."""
    engine = _engine(store_path)

    with pytest.raises(InvalidArgumentError):
        engine.create([])

    assert not store_path.exists()


@pytest.mark.parametrize(
    "call",
    [
        lambda engine: engine.create({"a": 1}),
        lambda engine: engine.get_all(),
        lambda engine: engine.get_by_id(1),
        lambda engine: engine.update(1, {"a": 2}),
        lambda engine: engine.remove(1),
    ],
)
def test_every_operation_reports_corruption(store_path, call) -> None:
    """A non-array file should fail every operation until fixed externally."""
    store_path.write_text('{"id": 1}', encoding="utf-8")
    engine = _engine(store_path)

    with pytest.raises(CorruptedStoreError):
        call(engine)

    assert store_path.read_text(encoding="utf-8") == '{"id": 1}'


def test_operations_recover_after_external_fix(store_path) -> None:
    """Once the file holds an array again, operations should succeed."""
    store_path.write_text('{"id": 1}', encoding="utf-8")
    engine = _engine(store_path)
    with pytest.raises(CorruptedStoreError):
        engine.get_all()
    store_path.write_text('[{"id": 1}]', encoding="utf-8")

    assert engine.create({"a": 1}) == {"id": 2, "a": 1}


def test_persist_failure_aborts_create() -> None:
    """A failing persist should propagate and report the create as failed."""
    backend = _FailingPersistBackend([{"id": 1}])
    engine = RecordEngine(backend)

    with pytest.raises(StoreIOError):
        engine.create({"a": 1})

    assert backend.persist_calls == 1 and backend.load() == [{"id": 1}]


def test_persist_failure_aborts_update_and_remove() -> None:
    """Update and remove should surface persist failures unchanged."""
    engine = RecordEngine(_FailingPersistBackend([{"id": 1, "a": 1}]))

    with pytest.raises(StoreIOError):
        engine.update(1, {"a": 2})
    with pytest.raises(StoreIOError):
        engine.remove(1)

    assert engine.get_by_id(1) == {"id": 1, "a": 1}


def test_create_returns_record_in_stored_form(store_path) -> None:
    """The returned record should equal what a later read yields."""
    engine = _engine(store_path)

    created = engine.create({"point": (1, 2), "items": [{"pair": ("a", "b")}]})

    assert created == engine.get_by_id(1) == {
        "id": 1,
        "point": [1, 2],
        "items": [{"pair": ["a", "b"]}],
    }


def test_update_returns_record_in_stored_form(store_path) -> None:
    """Merged records should be reported exactly as persisted."""
    engine = _seeded_engine(store_path, [{"id": 1, "a": 1}])

    updated = engine.update(1, {"range": (3, 4)})

    assert updated == engine.get_by_id(1) == {"id": 1, "a": 1, "range": [3, 4]}
