# src/pagescript/apps/bootstrap.py
from __future__ import annotations
from threading import RLock
from typing import Optional

import httpx

from pagescript.adapters.db import SQLite, SQLiteKV
from pagescript.adapters.dialogs import ConsoleDialogs
from pagescript.adapters.dom import HtmlDocument
from pagescript.adapters.fs.path_provider import PathProvider
from pagescript.adapters.navigation import HistoryNavigator
from pagescript.config import const
from pagescript.ports import Dialogs
from pagescript.sdk import build_surface
from pagescript.services.automation_context import AutomationContext, set_ctx
from pagescript.services.engine import ScriptingEngine
from pagescript.services.eventbus import LocalEventBus
from pagescript.services.host import ScriptHost
from pagescript.services.logging import attach_event_logger, setup_logging
from pagescript.services.policy.net import NetPolicy
from pagescript.services.recorder import Recorder
from pagescript.services.scheduler import Scheduler
from pagescript.services.scripts import ScriptStore
from pagescript.services.settings import Settings


class _CtxHolder:
    _ctx: Optional[AutomationContext] = None
    _lock = RLock()

    @classmethod
    def get(cls) -> AutomationContext:
        with cls._lock:
            if cls._ctx is None:
                cls._ctx = cls._build(Settings.from_sources())
                # публикуем в ContextVar
                set_ctx(cls._ctx)
            return cls._ctx

    @classmethod
    def init(
        cls,
        settings: Optional[Settings] = None,
        *,
        dialogs: Optional[Dialogs] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> AutomationContext:
        with cls._lock:
            cls._ctx = cls._build(settings or Settings.from_sources(), dialogs=dialogs, transport=transport)
            set_ctx(cls._ctx)  # публикуем
            return cls._ctx

    @classmethod
    def reload(cls, **overrides) -> AutomationContext:
        """Иммутабельная перегрузка: создаём новый Settings и пересобираем контекст."""
        with cls._lock:
            old = cls._ctx or cls._build(Settings.from_sources())
            new_settings = old.settings.with_overrides(**overrides)
            cls._ctx = cls._build(new_settings)
            set_ctx(cls._ctx)  # публикуем
            return cls._ctx

    @staticmethod
    def _build(
        settings: Settings,
        *,
        dialogs: Optional[Dialogs] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> AutomationContext:
        paths = PathProvider(settings)
        paths.ensure_tree()

        bus = LocalEventBus()
        root_logger = setup_logging(paths, settings.log_level)
        attach_event_logger(bus, root_logger.getChild("events"))

        # policies
        net = NetPolicy(settings.net_allow, settings.net_deny)

        sql = SQLite(paths)
        kv = SQLiteKV(sql, namespace=const.KV_NS_STORAGE)

        document = HtmlDocument()
        navigator = HistoryNavigator(document=document, bus=bus)
        dialogs = dialogs or ConsoleDialogs()

        surface = build_surface(
            navigator=navigator,
            document=document,
            dialogs=dialogs,
            kv=kv,
            bus=bus,
            net_policy=net,
            net_timeout=settings.net_timeout_sec,
            transport=transport,
            date_format=settings.date_format,
        )
        host = ScriptHost(surface, strict=settings.strict_sandbox, bus=bus)
        scheduler = Scheduler(host, bus=bus)
        recorder = Recorder(
            document,
            threshold_ms=settings.wait_threshold_ms,
            max_wait_ms=settings.max_wait_ms,
            bus=bus,
        )
        store = ScriptStore(kv.namespaced(const.KV_NS_SCRIPTS))
        engine = ScriptingEngine(host, scheduler, recorder, store, bus=bus)

        return AutomationContext(
            settings=settings,
            paths=paths,
            bus=bus,
            sql=sql,
            kv=kv,
            net=net,
            document=document,
            navigator=navigator,
            dialogs=dialogs,
            surface=surface,
            host=host,
            scheduler=scheduler,
            recorder=recorder,
            store=store,
            engine=engine,
        )


# ── публичные функции (удобные фасады) ─────────────────────────────────────────


def get_ctx() -> AutomationContext:
    """Shim: проксируем на services.automation_context.get_ctx()."""
    from pagescript.services.automation_context import get_ctx as _get

    return _get()


def init_ctx(
    settings: Optional[Settings] = None,
    *,
    dialogs: Optional[Dialogs] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AutomationContext:
    """Явная инициализация приложения и публикация контекста."""
    return _CtxHolder.init(settings, dialogs=dialogs, transport=transport)


def reload_ctx(**overrides) -> AutomationContext:
    """Пересборка с overrides и публикация контекста."""
    return _CtxHolder.reload(**overrides)
