# src/pagescript/adapters/navigation/history.py
from __future__ import annotations

import itertools
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Optional

from pagescript.config import const
from pagescript.ports import Document, EventBus, Navigator
from pagescript.services.eventbus import emit

_log = logging.getLogger("pagescript.navigation")


@dataclass(slots=True)
class _Tab:
    id: str
    entries: Deque[str] = field(default_factory=deque)
    index: int = -1
    reloads: int = 0

    def current(self) -> str:
        if self.index < 0:
            return const.BLANK_URL
        return self.entries[self.index]

    def push(self, url: str, limit: int) -> None:
        # навигация из середины истории отрезает "вперёд"
        while len(self.entries) > self.index + 1:
            self.entries.pop()
        self.entries.append(url)
        self.index = len(self.entries) - 1
        if len(self.entries) > limit:
            self.entries.popleft()
            self.index = max(0, self.index - 1)


class HistoryNavigator(Navigator):
    """
    Навигация без браузера: вкладки с ограниченной историей.
    Реальный переход на страницу делает встраивающее приложение;
    оно подписывается на события navigation.* шины.
    """

    def __init__(self, *, document: Optional[Document] = None, bus: Optional[EventBus] = None, history_limit: int = const.HISTORY_LIMIT) -> None:
        self._document = document
        self._bus = bus
        self._limit = history_limit
        self._ids = itertools.count(1)
        self._tabs: Dict[str, _Tab] = {}
        self._active = self.new_tab()

    # ---------- вкладки ----------

    def _tab(self) -> _Tab:
        return self._tabs[self._active]

    def tabs(self) -> list[str]:
        return list(self._tabs)

    @property
    def active_tab(self) -> str:
        return self._active

    def new_tab(self, url: Optional[str] = None) -> str:
        tab = _Tab(id=f"tab-{next(self._ids)}")
        self._tabs[tab.id] = tab
        self._active = tab.id
        if url:
            tab.push(url, self._limit)
        emit(self._bus, "navigation.tab.created", {"tab": tab.id, "url": tab.current()}, "navigation")
        return tab.id

    def close_tab(self, tab_id: Optional[str] = None) -> None:
        tab_id = tab_id or self._active
        if tab_id not in self._tabs:
            return
        del self._tabs[tab_id]
        emit(self._bus, "navigation.tab.closed", {"tab": tab_id}, "navigation")
        if not self._tabs:
            self.new_tab()
        elif tab_id == self._active:
            self._active = next(reversed(self._tabs))

    def activate(self, tab_id: str) -> None:
        if tab_id not in self._tabs:
            raise KeyError(tab_id)
        self._active = tab_id

    # ---------- история ----------

    def navigate(self, url: str) -> None:
        tab = self._tab()
        tab.push(url, self._limit)
        _log.info("navigation.navigate", extra={"extra": {"tab": tab.id, "url": url}})
        emit(self._bus, "navigation.navigate", {"tab": tab.id, "url": url}, "navigation")

    def back(self) -> bool:
        tab = self._tab()
        if tab.index <= 0:
            return False
        tab.index -= 1
        emit(self._bus, "navigation.back", {"tab": tab.id, "url": tab.current()}, "navigation")
        return True

    def forward(self) -> bool:
        tab = self._tab()
        if tab.index + 1 >= len(tab.entries):
            return False
        tab.index += 1
        emit(self._bus, "navigation.forward", {"tab": tab.id, "url": tab.current()}, "navigation")
        return True

    def reload(self) -> None:
        tab = self._tab()
        tab.reloads += 1
        emit(self._bus, "navigation.reload", {"tab": tab.id, "url": tab.current()}, "navigation")

    def history(self) -> list[str]:
        return list(self._tab().entries)

    def current_url(self) -> str:
        return self._tab().current()

    def title(self) -> str:
        if self._document is not None:
            return self._document.title()
        return ""
