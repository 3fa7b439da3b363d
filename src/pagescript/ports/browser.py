"""Ports for the host environment the capability surface drives.

Navigation, the page document and user dialogs belong to the embedding
application; pagescript only talks to them through these protocols.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, Sequence


@dataclass(slots=True)
class DomEvent:
    type: str
    target: Any
    key: Optional[str] = None
    code: Optional[str] = None
    ctrl_key: bool = False
    shift_key: bool = False
    alt_key: bool = False
    x: Optional[int] = None
    y: Optional[int] = None
    propagation_stopped: bool = False

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


Listener = Callable[[DomEvent], Any]


class Subscription(Protocol):
    def close(self) -> None: ...


class Document(Protocol):
    def query(self, selector: str) -> Any | None: ...
    def query_all(self, selector: str) -> Sequence[Any]: ...
    def text_of(self, element: Any) -> str: ...
    def set_value(self, element: Any, value: str) -> None: ...
    def dispatch(self, event: DomEvent) -> DomEvent: ...
    def listen(self, type_: str, listener: Listener, *, capture: bool = False) -> Subscription: ...
    def title(self) -> str: ...
    def value_of(self, element: Any) -> str: ...


class Navigator(Protocol):
    def navigate(self, url: str) -> None: ...
    def back(self) -> bool: ...
    def forward(self) -> bool: ...
    def reload(self) -> None: ...
    def new_tab(self, url: Optional[str] = None) -> str: ...
    def close_tab(self, tab_id: Optional[str] = None) -> None: ...
    def current_url(self) -> str: ...
    def title(self) -> str: ...


class Dialogs(Protocol):
    def alert(self, message: str) -> None: ...
    def prompt(self, message: str) -> Optional[str]: ...
