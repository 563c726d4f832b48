"""Exception hierarchy for the session engine."""

from __future__ import annotations


class SessionEngineError(Exception):
    """Base exception for all session_engine errors."""


class CatalogError(SessionEngineError):
    """An exercise catalog failed schema validation."""


class SnapshotDecodeError(SessionEngineError):
    """A persisted session snapshot could not be decoded."""


class SetValidationError(SessionEngineError):
    """A logged set is outside the accepted input ranges."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors
