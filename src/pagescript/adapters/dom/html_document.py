# src/pagescript/adapters/dom/html_document.py
"""In-process page document backed by BeautifulSoup.

Selectors are evaluated by soupsieve (the CSS engine behind ``Tag.select``).
Events are dispatched in two phases: capture listeners first, then bubble
listeners, and ``DomEvent.stop_propagation()`` only cuts the bubble phase
short. Recorders therefore listen in capture phase.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, DefaultDict, List, Optional

from bs4 import BeautifulSoup, Tag

from pagescript.ports import Document, DomEvent, Listener

_EMPTY_PAGE = "<html><head><title></title></head><body></body></html>"


@dataclass(slots=True)
class _Registration:
    type: str
    listener: Listener
    capture: bool
    _owner: Optional["HtmlDocument"] = field(default=None, repr=False)

    def close(self) -> None:
        owner = self._owner
        if owner is None:
            return
        owner._remove(self)
        self._owner = None


class HtmlDocument(Document):
    def __init__(self, html: str | None = None, *, parser: str = "html.parser") -> None:
        self._parser = parser
        self._soup = BeautifulSoup(html or _EMPTY_PAGE, parser)
        self._listeners: DefaultDict[str, List[_Registration]] = defaultdict(list)

    # ---------- содержимое ----------

    @property
    def soup(self) -> BeautifulSoup:
        return self._soup

    def load(self, html: str) -> None:
        """Replace page content; listeners stay attached like on a real document."""
        self._soup = BeautifulSoup(html, self._parser)

    def title(self) -> str:
        tag = self._soup.title
        return tag.get_text(strip=True) if tag else ""

    def query(self, selector: str) -> Tag | None:
        return self._soup.select_one(selector)

    def query_all(self, selector: str) -> list[Tag]:
        return list(self._soup.select(selector))

    def text_of(self, element: Any) -> str:
        return element.get_text() if isinstance(element, Tag) else ""

    def set_value(self, element: Any, value: str) -> None:
        if not isinstance(element, Tag):
            return
        if element.name == "textarea":
            element.string = value
        else:
            element["value"] = value

    def value_of(self, element: Any) -> str:
        if not isinstance(element, Tag):
            return ""
        if element.name == "textarea":
            return element.get_text()
        return str(element.get("value", ""))

    # ---------- события ----------

    def listen(self, type_: str, listener: Listener, *, capture: bool = False) -> _Registration:
        reg = _Registration(type=type_, listener=listener, capture=capture, _owner=self)
        self._listeners[type_].append(reg)
        return reg

    def _remove(self, reg: _Registration) -> None:
        regs = self._listeners.get(reg.type)
        if regs and reg in regs:
            regs.remove(reg)

    def listener_count(self, type_: str | None = None) -> int:
        if type_ is not None:
            return len(self._listeners.get(type_, ()))
        return sum(len(v) for v in self._listeners.values())

    def dispatch(self, event: DomEvent) -> DomEvent:
        regs = list(self._listeners.get(event.type, ()))
        for reg in (r for r in regs if r.capture):
            reg.listener(event)
        for reg in (r for r in regs if not r.capture):
            if event.propagation_stopped:
                break
            reg.listener(event)
        return event

    # ---------- имитация пользователя ----------

    def user_click(self, element: Tag, *, x: int | None = None, y: int | None = None) -> DomEvent:
        return self.dispatch(DomEvent(type="click", target=element, x=x, y=y))

    def user_input(self, element: Tag, value: str) -> DomEvent:
        self.set_value(element, value)
        return self.dispatch(DomEvent(type="input", target=element))

    def user_key(self, key: str, *, target: Tag | None = None, code: str | None = None, ctrl: bool = False, shift: bool = False, alt: bool = False) -> DomEvent:
        return self.dispatch(
            DomEvent(
                type="keydown",
                target=target if target is not None else self._soup.body,
                key=key,
                code=code,
                ctrl_key=ctrl,
                shift_key=shift,
                alt_key=alt,
            )
        )

