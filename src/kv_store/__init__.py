"""Key-value storage adapter. All snapshot storage I/O lives here."""

from kv_store.exceptions import KeyValueStoreError, StoreReadError, StoreWriteError
from kv_store.store import FileKeyValueStore, InMemoryKeyValueStore, KeyValueStore

__all__ = [
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "KeyValueStoreError",
    "StoreReadError",
    "StoreWriteError",
]
