"""Key-value store abstraction for tracker persistence.

Values are JSON strings keyed by string. The file-backed store keeps
every key in a single JSON object, written atomically with owner-only
permissions (0o600).
"""

import asyncio
import contextlib
import json
import os
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()

_FILE_PERMISSIONS = 0o600  # owner read/write only


class KeyValueStore(Protocol):
    """Protocol for string-keyed persistence of serialized records."""

    async def get_item(self, key: str) -> str | None: ...

    async def set_item(self, key: str, value: str) -> None: ...

    async def remove_item(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """In-process store. Contents are lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileKeyValueStore:
    """File-backed store.

    Loads the JSON file into memory on first access and writes the whole
    file back on every mutation. Uses asyncio.Lock for write safety within
    a single process; multiple processes sharing one file are not supported.
    """

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path)
        self._items: dict[str, str] = {}
        self._lock = asyncio.Lock()
        self._loaded = False

    @property
    def file_path(self) -> Path:
        return self._file_path

    async def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._load_from_file()
        self._loaded = True

    def _load_from_file(self) -> None:
        """Load items from the JSON file.

        Starts empty when the file does not exist yet. Raises OSError on
        read/parse failures of an existing file, so a file we could not
        read is never overwritten.
        """
        self._items = {}

        if not self._file_path.exists():
            return

        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, ValueError, OSError) as exc:
            msg = f"Failed to load store from {self._file_path}"
            raise OSError(msg) from exc

        if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
            msg = f"Expected JSON object of string values in {self._file_path}"
            raise OSError(msg)

        self._items = data

    def _save_to_file(self) -> None:
        """Atomically write all items: temp file in the same directory, then rename."""
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(self._items, indent=2).encode("utf-8")

        fd, tmp_path = tempfile.mkstemp(
            dir=self._file_path.parent,
            prefix=".tracker_",
            suffix=".tmp",
        )
        fd_owned = True
        try:
            with os.fdopen(fd, "wb") as f:
                fd_owned = False  # os.fdopen closes fd from here on
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _FILE_PERMISSIONS)  # noqa: PTH101
            Path(tmp_path).replace(self._file_path)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise

    async def get_item(self, key: str) -> str | None:
        async with self._lock:
            await self._ensure_loaded()
            return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        """Store a value. On write failure the in-memory state is rolled back and the error re-raised."""
        async with self._lock:
            await self._ensure_loaded()
            previous = self._items.get(key)
            self._items[key] = value
            try:
                self._save_to_file()
            except OSError:
                if previous is None:
                    del self._items[key]
                else:
                    self._items[key] = previous
                raise
        logger.debug("stored item", key=key, path=str(self._file_path))

    async def remove_item(self, key: str) -> None:
        async with self._lock:
            await self._ensure_loaded()
            if key not in self._items:
                return
            previous = self._items.pop(key)
            try:
                self._save_to_file()
            except OSError:
                self._items[key] = previous
                raise
