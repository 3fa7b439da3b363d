"""``dom`` capability group.

Missing elements are not errors: ``click``/``type``/``setAttribute`` do
nothing, ``getText`` returns ``""`` and ``getAttribute`` returns ``None``.
Malformed selectors raise :class:`SelectorError`.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

import soupsieve

from pagescript.ports import Document, DomEvent

from ._surface import CapabilityGroup
from .errors import SelectorError

T = TypeVar("T")


class DomCapabilities:
    def __init__(self, document: Document) -> None:
        self._doc = document

    def _guard(self, op: str, selector: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except soupsieve.SelectorSyntaxError as exc:
            raise SelectorError(f"dom.{op}", selector, str(exc).splitlines()[0]) from exc

    def select(self, selector: str) -> Any | None:
        return self._guard("select", selector, lambda: self._doc.query(selector))

    def select_all(self, selector: str) -> list[Any]:
        return self._guard("selectAll", selector, lambda: list(self._doc.query_all(selector)))

    def click(self, selector: str) -> None:
        el = self._guard("click", selector, lambda: self._doc.query(selector))
        if el is not None:
            self._doc.dispatch(DomEvent(type="click", target=el))

    def type(self, selector: str, text: Any) -> None:
        el = self._guard("type", selector, lambda: self._doc.query(selector))
        if el is None:
            return
        self._doc.set_value(el, "" if text is None else str(text))
        self._doc.dispatch(DomEvent(type="input", target=el))

    def get_text(self, selector: str) -> str:
        el = self._guard("getText", selector, lambda: self._doc.query(selector))
        return self._doc.text_of(el) if el is not None else ""

    def get_attribute(self, selector: str, name: str) -> str | None:
        el = self._guard("getAttribute", selector, lambda: self._doc.query(selector))
        if el is None:
            return None
        value = el.get(name)
        if isinstance(value, list):  # class и прочие multi-valued атрибуты bs4
            return " ".join(value)
        return value

    def set_attribute(self, selector: str, name: str, value: Any) -> None:
        el = self._guard("setAttribute", selector, lambda: self._doc.query(selector))
        if el is not None:
            el[name] = str(value)

    def group(self) -> CapabilityGroup:
        return CapabilityGroup(
            "dom",
            {
                "select": self.select,
                "selectAll": self.select_all,
                "click": self.click,
                "type": self.type,
                "getText": self.get_text,
                "getAttribute": self.get_attribute,
                "setAttribute": self.set_attribute,
            },
        )
