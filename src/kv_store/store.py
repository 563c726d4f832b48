"""Key-value stores for engine snapshots.

Values are opaque strings. Every write is a whole-value replace: readers
see either the previous value or the new one, never a partial write.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from kv_store.exceptions import StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)

_DEFAULT_STORE_DIR = Path("~/.fittrack").expanduser()


class KeyValueStore(Protocol):
    """Minimal synchronous string store."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store for tests and ephemeral hosts."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class FileKeyValueStore:
    """One file per key under *directory*, replaced atomically on write."""

    def __init__(self, directory: Path | str = _DEFAULT_STORE_DIR) -> None:
        self._dir = Path(directory).expanduser()

    @property
    def directory(self) -> Path:
        return self._dir

    def _path_for(self, key: str) -> Path:
        # Sanitise key into a filename
        safe = "".join(c if c.isalnum() or c in "-_." else "_" for c in key).strip("._")
        return self._dir / f"{safe or 'default'}.json"

    def get(self, key: str) -> str | None:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreReadError(f"Failed to read {path}: {exc}", key=key) from exc

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._dir, prefix=f".{path.stem}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StoreWriteError(f"Failed to write {path}: {exc}", key=key) from exc
        logger.debug("Wrote %d bytes to %s", len(value), path)

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StoreWriteError(f"Failed to delete {path}: {exc}", key=key) from exc
        logger.debug("Deleted %s", path)
