"""Persistence boundary: load the snapshot on init, save after every mutation.

The state machine stays storage-agnostic; this wrapper is the only place
that talks to the key-value store. Storage failures never propagate:
a failed or corrupt load starts in NO_SESSION, and a failed save is logged
while the in-memory state stays authoritative.
"""

from __future__ import annotations

import logging
from typing import Sequence

from kv_store import KeyValueStore, KeyValueStoreError
from session_engine.exceptions import SnapshotDecodeError
from session_engine.math.clock import utc_now
from session_engine.models.workout import ActiveSession, WorkoutExercise, WorkoutSet
from session_engine.serialization.snapshot import dumps_snapshot, loads_snapshot
from session_engine.session.state_machine import Clock, SessionStateMachine

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "workout-storage"


def load_snapshot(store: KeyValueStore, key: str = SNAPSHOT_KEY) -> ActiveSession | None:
    """Read the persisted session, treating any failure as "no snapshot"."""
    try:
        raw = store.get(key)
    except KeyValueStoreError as exc:
        logger.warning("Could not read session snapshot %r, starting fresh: %s", key, exc)
        return None
    if raw is None:
        return None
    try:
        return loads_snapshot(raw)
    except SnapshotDecodeError as exc:
        logger.warning("Discarding corrupt session snapshot %r: %s", key, exc)
        return None


class PersistentSession:
    """A SessionStateMachine whose snapshot is mirrored to a key-value store.

    The restored snapshot is taken verbatim: an arbitrarily old running
    session is still running.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = SNAPSHOT_KEY,
        clock: Clock = utc_now,
    ) -> None:
        self._store = store
        self._key = key
        session = load_snapshot(store, key)
        if session is not None:
            logger.info("Restored session %s started at %s", session.session_id, session.started_at)
        self.machine = SessionStateMachine(session=session, clock=clock)

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def session(self) -> ActiveSession | None:
        return self.machine.session

    def save(self) -> None:
        """Write the current snapshot, or clear it when there is no session."""
        try:
            if self.machine.session is None:
                self._store.delete(self._key)
            else:
                self._store.set(self._key, dumps_snapshot(self.machine.session))
        except KeyValueStoreError as exc:
            logger.warning("Could not persist session snapshot %r: %s", self._key, exc)
            return
        logger.debug("Saved session snapshot %r", self._key)

    # ------------------------------------------------------------------
    # Mutations (delegate, then save)
    # ------------------------------------------------------------------

    def start(self, session_id: str, exercises: Sequence[WorkoutExercise] = ()) -> ActiveSession:
        session = self.machine.start(session_id, exercises)
        logger.info("Started session %s with %d exercises", session_id, len(session.exercises))
        self.save()
        return session

    def pause(self) -> None:
        self.machine.pause()
        self.save()

    def resume(self) -> None:
        self.machine.resume()
        self.save()

    def add_set(self, exercise_id: str, workout_set: WorkoutSet) -> None:
        self.machine.add_set(exercise_id, workout_set)
        self.save()

    def set_current_exercise(self, exercise_id: str | None) -> None:
        self.machine.set_current_exercise(exercise_id)
        self.save()

    def update_exercises(self, exercises: Sequence[WorkoutExercise]) -> None:
        self.machine.update_exercises(exercises)
        self.save()

    def end(self) -> ActiveSession | None:
        ended = self.machine.end()
        if ended is not None:
            logger.info("Ended session %s", ended.session_id)
        self.save()
        return ended
