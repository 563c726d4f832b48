"""Serialization module: the persisted active-session snapshot format."""

from session_engine.serialization.snapshot import (
    dumps_snapshot,
    loads_snapshot,
    session_from_snapshot,
    session_to_snapshot,
)

__all__ = [
    "dumps_snapshot",
    "loads_snapshot",
    "session_from_snapshot",
    "session_to_snapshot",
]
