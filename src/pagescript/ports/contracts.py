from __future__ import annotations
import sqlite3
from typing import Any, Callable, Protocol

from pagescript.domain import Event


class EventBus(Protocol):
    def subscribe(self, type_prefix: str, handler: Callable[[Event], Any]) -> None: ...
    def publish(self, event: Event) -> None: ...


class KV(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...
    def set(self, key: str, value: Any) -> None: ...
    def delete(self, key: str) -> None: ...
    def keys(self, prefix: str = "") -> list[str]: ...
    def clear(self) -> None: ...


class SQL(Protocol):
    def connect(self) -> sqlite3.Connection: ...

