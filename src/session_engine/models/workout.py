"""Session models: logged sets, session exercises and the active session snapshot."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime

from session_engine.models.enums import SessionStatus


@dataclass(frozen=True)
class WorkoutSet:
    """One performed set. Append-only once recorded."""

    set_number: int
    reps: int
    completed_at: datetime
    weight: float | None = None  # None for unloaded / bodyweight sets
    rir: int | None = None  # Reps in reserve, 0-10
    set_id: str | None = None


@dataclass(frozen=True)
class WorkoutExercise:
    """An exercise within a session; sets are in performed order."""

    exercise_id: str
    name: str
    sort_order: int = 0
    sets: tuple[WorkoutSet, ...] = field(default_factory=tuple)

    def with_set(self, workout_set: WorkoutSet) -> WorkoutExercise:
        """Return a copy with *workout_set* appended."""
        return dataclasses.replace(self, sets=self.sets + (workout_set,))


@dataclass(frozen=True)
class PausePeriod:
    """A completed pause interval."""

    paused_at: datetime
    resumed_at: datetime


@dataclass(frozen=True)
class ActiveSession:
    """The single in-progress workout and the unit of persistence.

    ``paused_at`` is set if and only if the session is paused.
    ``pause_periods`` holds completed pause intervals, oldest first.
    """

    session_id: str
    started_at: datetime
    current_exercise_id: str | None = None
    exercises: tuple[WorkoutExercise, ...] = field(default_factory=tuple)
    paused_at: datetime | None = None
    pause_periods: tuple[PausePeriod, ...] = field(default_factory=tuple)

    @property
    def is_paused(self) -> bool:
        return self.paused_at is not None

    @property
    def status(self) -> SessionStatus:
        return SessionStatus.PAUSED if self.is_paused else SessionStatus.RUNNING

    def exercise(self, exercise_id: str) -> WorkoutExercise | None:
        """Return the exercise with *exercise_id*, or None."""
        for ex in self.exercises:
            if ex.exercise_id == exercise_id:
                return ex
        return None

    @property
    def all_sets(self) -> tuple[WorkoutSet, ...]:
        """Every logged set across exercises, in exercise order."""
        return tuple(s for ex in self.exercises for s in ex.sets)
