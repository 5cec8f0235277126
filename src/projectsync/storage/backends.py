"""Key-addressed string storage backends."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Protocol


class KeyValueStorage(Protocol):
    """Blocking get/set of whole text documents by key."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Process-local storage; each instance is independent."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class FileStorage:
    """One ``<key>.json`` document per key under *root*.

    Writes go to a temp file in the same directory which is then renamed over
    the target, so readers see either the old or the new document.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        target = self.path_for(key)
        fd, temp_name = tempfile.mkstemp(
            dir=self.root, prefix=f".{key}.", suffix=".tmp",
        )
        temp = Path(temp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            temp.replace(target)
        finally:
            if temp.exists():
                temp.unlink(missing_ok=True)
