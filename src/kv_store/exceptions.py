"""Custom exception hierarchy for the key-value store adapter."""

from __future__ import annotations


class KeyValueStoreError(Exception):
    """Base exception for all kv_store errors."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class StoreReadError(KeyValueStoreError):
    """A value could not be read from the store."""


class StoreWriteError(KeyValueStoreError):
    """A value could not be written to (or removed from) the store."""
