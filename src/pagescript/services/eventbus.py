# src/pagescript/services/eventbus.py
from __future__ import annotations
import asyncio
import logging
import time
from collections import defaultdict
from threading import RLock
from typing import Callable, Awaitable, Any, DefaultDict, List

from pagescript.domain import Event
from pagescript.ports import EventBus

Handler = Callable[[Event], Any] | Callable[[Event], Awaitable[Any]]

_log = logging.getLogger("pagescript.eventbus")


class LocalEventBus(EventBus):
    """
    Bus for host, scheduler, recorder and navigation events, matched by type prefix.

    A subscriber that raises is logged and skipped: publishers (the script host
    in particular) never see handler errors.
    """

    def __init__(self) -> None:
        self._subs: DefaultDict[str, List[Handler]] = defaultdict(list)
        self._lock = RLock()

    def subscribe(self, type_prefix: str, handler: Handler) -> None:
        with self._lock:
            self._subs[type_prefix].append(handler)

    def unsubscribe(self, type_prefix: str, handler: Handler) -> None:
        with self._lock:
            handlers = self._subs.get(type_prefix)
            if handlers and handler in handlers:
                handlers.remove(handler)

    def publish(self, event: Event) -> None:
        with self._lock:
            pairs = [(p, hs[:]) for p, hs in self._subs.items()]
        for prefix, handlers in pairs:
            # "" и "*" совпадают с любым типом
            if prefix not in ("", "*") and not event.type.startswith(prefix):
                continue
            for h in handlers:
                try:
                    res = h(event)
                except Exception:
                    _log.exception("eventbus.handler.failed", extra={"extra": {"type": event.type, "prefix": prefix}})
                    continue
                if asyncio.iscoroutine(res):
                    try:
                        loop = asyncio.get_running_loop()
                    except RuntimeError:
                        asyncio.run(res)
                    else:
                        loop.create_task(res)


def emit(bus: EventBus | None, type_: str, payload: dict, source: str) -> None:
    if bus is None:
        return
    bus.publish(Event(type=type_, payload=payload, source=source, ts=time.time()))
