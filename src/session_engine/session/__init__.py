"""Active-session lifecycle: state machine, persistence boundary and timer."""

from session_engine.session.persistence import SNAPSHOT_KEY, PersistentSession
from session_engine.session.state_machine import SessionStateMachine
from session_engine.session.timer import SessionTimer, TimerReading

__all__ = [
    "PersistentSession",
    "SNAPSHOT_KEY",
    "SessionStateMachine",
    "SessionTimer",
    "TimerReading",
]
