"""Key-value JSON storage used by the transaction store and sync cursor."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from ..core.errors import PersistenceError

logger = logging.getLogger(__name__)


class KeyValueStore:
    """
    JSON key-value store, held in memory and optionally mirrored to a file.

    With a ``path`` every write rewrites the whole file; the store is meant for
    a single local user, not for concurrent writers. The async methods do their
    file I/O inline and block the event loop while they run, which is fine for
    the small files one user produces. Use a real database for anything larger.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else None
        self._data: dict[str, Any] = {}
        self._loaded = False

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        if self.path is None or not self.path.exists():
            self._loaded = True
            return
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Failed to load store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"Store file {self.path} does not hold an object")
        self._data = data
        self._loaded = True

    def _flush(self) -> None:
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)
            tmp_path.replace(self.path)
        except OSError as e:
            raise PersistenceError(f"Failed to write store {self.path}: {e}") from e

    async def read_json(self, key: str) -> Any:
        """Value stored under ``key``, or None."""
        self._ensure_loaded()
        return self._data.get(key)

    async def write_json(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under ``key``."""
        self._ensure_loaded()
        self._data[key] = value
        self._flush()

    async def keys(self, prefix: str = "") -> list[str]:
        self._ensure_loaded()
        return [k for k in self._data if k.startswith(prefix)]
