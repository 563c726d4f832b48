"""Timer driver: turns periodic ticks and app-lifecycle events into readings.

The driver never counts ticks. Each reading is recomputed from the session's
timestamps, so missed or late ticks (the process was suspended) leave no
drift once the next tick or a became-active event arrives.
"""

from __future__ import annotations

from dataclasses import dataclass

from session_engine.math.clock import format_duration
from session_engine.models.enums import AppState
from session_engine.session.state_machine import SessionStateMachine

_SUSPENDED_STATES = frozenset({AppState.INACTIVE, AppState.BACKGROUND})


@dataclass(frozen=True)
class TimerReading:
    elapsed_ms: int
    formatted: str
    is_running: bool


_IDLE_READING = TimerReading(elapsed_ms=0, formatted=format_duration(0), is_running=False)


class SessionTimer:
    """Produces display readings for the active session."""

    def __init__(
        self,
        machine: SessionStateMachine,
        app_state: AppState = AppState.ACTIVE,
    ) -> None:
        self._machine = machine
        self._app_state = app_state
        self.last_reading = _IDLE_READING

    @property
    def app_state(self) -> AppState:
        return self._app_state

    def tick(self) -> TimerReading:
        """Recompute the reading from the current snapshot."""
        if self._machine.session is None:
            self.last_reading = _IDLE_READING
            return self.last_reading
        elapsed = self._machine.elapsed_ms()
        self.last_reading = TimerReading(
            elapsed_ms=elapsed,
            formatted=format_duration(elapsed),
            is_running=self._machine.is_running,
        )
        return self.last_reading

    def on_app_state_change(self, next_state: AppState) -> TimerReading | None:
        """Handle a host lifecycle transition.

        Returns a fresh reading when the app becomes active again from
        inactive/background while a session is running, else None.
        """
        previous = self._app_state
        self._app_state = next_state
        if (
            previous in _SUSPENDED_STATES
            and next_state == AppState.ACTIVE
            and self._machine.is_running
        ):
            return self.tick()
        return None
