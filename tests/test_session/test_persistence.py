"""Tests for the persistence boundary around the state machine."""

from __future__ import annotations

import json
import logging

from kv_store import FileKeyValueStore, InMemoryKeyValueStore, StoreReadError, StoreWriteError
from session_engine.models.enums import SessionStatus
from session_engine.serialization import dumps_snapshot
from session_engine.session.persistence import SNAPSHOT_KEY, PersistentSession, load_snapshot


class FailingStore(InMemoryKeyValueStore):
    """Store whose reads and/or writes raise."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = False) -> None:
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise StoreReadError("disk on fire", key=key)
        return super().get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StoreWriteError("disk full", key=key)
        super().set(key, value)

    def delete(self, key: str) -> None:
        if self.fail_writes:
            raise StoreWriteError("disk full", key=key)
        super().delete(key)


class TestSaveAfterMutation:
    def test_start_writes_snapshot(self, clock, sample_exercises) -> None:
        store = InMemoryKeyValueStore()
        tracker = PersistentSession(store, clock=clock)
        tracker.start("s1", sample_exercises)
        data = json.loads(store.get(SNAPSHOT_KEY))
        assert data["sessionId"] == "s1"
        assert data["isPaused"] is False
        assert data["pausedAt"] is None
        assert [ex["id"] for ex in data["exercises"]] == ["ex-bench", "ex-row"]

    def test_every_mutation_is_saved(self, clock, sample_exercises, set_factory) -> None:
        store = InMemoryKeyValueStore()
        tracker = PersistentSession(store, clock=clock)
        tracker.start("s1", sample_exercises)
        tracker.add_set("ex-row", set_factory(reps=12, weight=30.0))
        tracker.set_current_exercise("ex-row")
        tracker.pause()
        data = json.loads(store.get(SNAPSHOT_KEY))
        assert data["isPaused"] is True
        assert data["currentExerciseId"] == "ex-row"
        assert data["exercises"][1]["sets"][0]["reps"] == 12

    def test_end_clears_snapshot(self, clock, sample_exercises) -> None:
        store = InMemoryKeyValueStore()
        tracker = PersistentSession(store, clock=clock)
        tracker.start("s1", sample_exercises)
        tracker.end()
        assert SNAPSHOT_KEY not in store


class TestRestore:
    def test_round_trip_through_store(self, clock, sample_exercises, set_factory) -> None:
        store = InMemoryKeyValueStore()
        first = PersistentSession(store, clock=clock)
        first.start("s1", sample_exercises)
        first.add_set("ex-bench", set_factory(reps=5, weight=100.0, rir=1))
        restored = PersistentSession(store, clock=clock)
        assert restored.session == first.session
        assert restored.machine.status == SessionStatus.RUNNING

    def test_paused_snapshot_has_stable_elapsed(self, clock, sample_exercises) -> None:
        store = InMemoryKeyValueStore()
        first = PersistentSession(store, clock=clock)
        first.start("s1", sample_exercises)
        clock.advance(125)
        first.pause()

        restored = PersistentSession(store, clock=clock)
        readings = []
        for _ in range(3):
            clock.advance(3600)
            readings.append(restored.machine.elapsed_ms())
        assert readings == [125_000] * 3

        restored.resume()
        clock.advance(5)
        assert restored.machine.elapsed_ms() == 130_000

    def test_keep_awake_is_not_restored(self, clock, sample_exercises) -> None:
        store = InMemoryKeyValueStore()
        PersistentSession(store, clock=clock).start("s1", sample_exercises)
        assert not PersistentSession(store, clock=clock).machine.keep_awake

    def test_empty_store_starts_without_session(self, clock) -> None:
        tracker = PersistentSession(InMemoryKeyValueStore(), clock=clock)
        assert tracker.session is None


class TestFailOpen:
    def test_read_failure_starts_fresh(self, clock, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            tracker = PersistentSession(FailingStore(fail_reads=True), clock=clock)
        assert tracker.session is None
        assert "Could not read session snapshot" in caplog.text

    def test_corrupt_snapshot_starts_fresh(self, clock) -> None:
        store = InMemoryKeyValueStore({SNAPSHOT_KEY: "{not json"})
        assert load_snapshot(store) is None
        assert PersistentSession(store, clock=clock).session is None

    def test_snapshot_missing_fields_starts_fresh(self, clock) -> None:
        store = InMemoryKeyValueStore({SNAPSHOT_KEY: json.dumps({"exercises": []})})
        assert PersistentSession(store, clock=clock).session is None

    def test_undecodable_snapshot_file_starts_fresh(self, clock, tmp_path, caplog) -> None:
        (tmp_path / f"{SNAPSHOT_KEY}.json").write_bytes(b"\xff\xfe{bad")
        with caplog.at_level(logging.WARNING):
            tracker = PersistentSession(FileKeyValueStore(tmp_path), clock=clock)
        assert tracker.session is None
        assert "Could not read session snapshot" in caplog.text

    def test_out_of_range_number_starts_fresh(self, clock) -> None:
        raw = (
            '{"sessionId": "s1", "startedAt": "2025-01-15T10:00:00.000Z", '
            '"exercises": [{"id": "ex-1", "name": "Curl", "sets": '
            '[{"setNumber": 1, "reps": Infinity, "completedAt": "2025-01-15T10:01:00.000Z"}]}]}'
        )
        store = InMemoryKeyValueStore({SNAPSHOT_KEY: raw})
        assert PersistentSession(store, clock=clock).session is None

    def test_write_failure_keeps_memory_state(self, clock, sample_exercises, caplog) -> None:
        store = FailingStore(fail_writes=True)
        tracker = PersistentSession(store, clock=clock)
        with caplog.at_level(logging.WARNING):
            tracker.start("s1", sample_exercises)
            tracker.pause()
        assert tracker.machine.status == SessionStatus.PAUSED
        assert "Could not persist session snapshot" in caplog.text

    def test_next_save_replaces_stale_snapshot(self, clock, sample_exercises) -> None:
        store = FailingStore()
        tracker = PersistentSession(store, clock=clock)
        tracker.start("s1", sample_exercises)
        store.fail_writes = True
        tracker.pause()
        store.fail_writes = False
        tracker.set_current_exercise("ex-row")
        assert store.get(SNAPSHOT_KEY) == dumps_snapshot(tracker.session)
