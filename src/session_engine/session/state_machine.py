"""SessionStateMachine: owns the lifecycle of at most one active workout.

States are NO_SESSION, RUNNING and PAUSED. Ending a session returns to
NO_SESSION; there is no retained "ended" state.

Every mutator is a silent no-op when there is no session (a double-tapped
pause, or a set logged after the session was ended elsewhere, must not
crash the UI). Storage is not this class's concern; see
``session_engine.session.persistence`` for the save/load boundary.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Callable, Sequence

from session_engine.math.clock import elapsed_across_pauses, utc_now
from session_engine.models.enums import SessionStatus
from session_engine.models.workout import (
    ActiveSession,
    PausePeriod,
    WorkoutExercise,
    WorkoutSet,
)

Clock = Callable[[], datetime]


class SessionStateMachine:
    """Explicit state container for the active session.

    Usage:
        machine = SessionStateMachine()
        machine.start("session-1", exercises)
        machine.add_set(exercises[0].exercise_id, workout_set)
        machine.pause()
        machine.elapsed_ms()
    """

    def __init__(
        self,
        session: ActiveSession | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._clock = clock
        self.session = session
        # Transient UI flag, never persisted
        self.keep_awake = False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        if self.session is None:
            return SessionStatus.NO_SESSION
        return self.session.status

    @property
    def is_running(self) -> bool:
        return self.status == SessionStatus.RUNNING

    @property
    def should_keep_awake(self) -> bool:
        """Keep the screen on only while a session is actively running."""
        return self.keep_awake and self.is_running

    def now(self) -> datetime:
        return self._clock()

    def elapsed_ms(self) -> int:
        """Active milliseconds in the session, recomputed from timestamps.

        Frozen at the pause instant while paused; 0 with no session.
        """
        if self.session is None:
            return 0
        end = self.session.paused_at or self._clock()
        return elapsed_across_pauses(self.session.started_at, self.session.pause_periods, now=end)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self, session_id: str, exercises: Sequence[WorkoutExercise] = ()) -> ActiveSession:
        """Begin a new session, overwriting any existing one."""
        exercises = tuple(exercises)
        self.session = ActiveSession(
            session_id=session_id,
            started_at=self._clock(),
            current_exercise_id=exercises[0].exercise_id if exercises else None,
            exercises=exercises,
        )
        self.keep_awake = True
        return self.session

    def pause(self) -> None:
        """Freeze the clock. Re-pausing moves the pause instant to now."""
        if self.session is None:
            return
        self.session = dataclasses.replace(self.session, paused_at=self._clock())

    def resume(self) -> None:
        """Unfreeze the clock, recording the finished pause interval."""
        if self.session is None:
            return
        periods = self.session.pause_periods
        if self.session.paused_at is not None:
            periods = periods + (PausePeriod(self.session.paused_at, self._clock()),)
        self.session = dataclasses.replace(self.session, paused_at=None, pause_periods=periods)

    def add_set(self, exercise_id: str, workout_set: WorkoutSet) -> None:
        """Append *workout_set* to the matching exercise; unknown ids are ignored."""
        if self.session is None:
            return
        exercises = tuple(
            ex.with_set(workout_set) if ex.exercise_id == exercise_id else ex
            for ex in self.session.exercises
        )
        self.session = dataclasses.replace(self.session, exercises=exercises)

    def set_current_exercise(self, exercise_id: str | None) -> None:
        """Point at *exercise_id* (or nothing). The id is not validated."""
        if self.session is None:
            return
        self.session = dataclasses.replace(self.session, current_exercise_id=exercise_id)

    def update_exercises(self, exercises: Sequence[WorkoutExercise]) -> None:
        """Replace the whole exercise list."""
        if self.session is None:
            return
        self.session = dataclasses.replace(self.session, exercises=tuple(exercises))

    def end(self) -> ActiveSession | None:
        """Clear the session from any state. Returns the session that was ended."""
        ended = self.session
        self.session = None
        self.keep_awake = False
        return ended

    def next_set_number(self, exercise_id: str) -> int:
        """1-based ordinal for the next set of *exercise_id*."""
        if self.session is None:
            return 1
        exercise = self.session.exercise(exercise_id)
        return len(exercise.sets) + 1 if exercise else 1
