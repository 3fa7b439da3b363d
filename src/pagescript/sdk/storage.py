"""``storage`` capability group: JSON values in a dedicated KV namespace."""

from __future__ import annotations

import sqlite3
from typing import Any

from pagescript.ports import KV

from ._surface import CapabilityGroup
from .errors import StorageError


class StorageCapabilities:
    def __init__(self, kv: KV) -> None:
        self._kv = kv

    def set(self, key: Any, value: Any) -> None:
        try:
            self._kv.set(str(key), value)
        except (TypeError, ValueError) as exc:
            raise StorageError("storage.set", f"{key!r}: value is not JSON-serializable ({exc})") from exc
        except sqlite3.Error as exc:
            raise StorageError("storage.set", str(exc)) from exc

    def get(self, key: Any) -> Any:
        try:
            return self._kv.get(str(key), None)
        except sqlite3.Error as exc:
            raise StorageError("storage.get", str(exc)) from exc

    def remove(self, key: Any) -> None:
        try:
            self._kv.delete(str(key))
        except sqlite3.Error as exc:
            raise StorageError("storage.remove", str(exc)) from exc

    def clear(self) -> None:
        try:
            self._kv.clear()
        except sqlite3.Error as exc:
            raise StorageError("storage.clear", str(exc)) from exc

    def group(self) -> CapabilityGroup:
        return CapabilityGroup(
            "storage",
            {"set": self.set, "get": self.get, "remove": self.remove, "clear": self.clear},
        )
