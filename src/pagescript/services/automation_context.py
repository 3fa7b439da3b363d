# src/pagescript/services/automation_context.py
from __future__ import annotations
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from pagescript.adapters.dom import HtmlDocument
from pagescript.adapters.navigation import HistoryNavigator
from pagescript.ports import KV, SQL, Dialogs, EventBus
from pagescript.ports.paths import PathProvider
from pagescript.sdk import CapabilitySurface
from pagescript.services.policy.net import NetPolicy
from pagescript.services.settings import Settings

if TYPE_CHECKING:
    from pagescript.services.engine import ScriptingEngine
    from pagescript.services.host import ScriptHost
    from pagescript.services.recorder import Recorder
    from pagescript.services.scheduler import Scheduler
    from pagescript.services.scripts import ScriptStore

_CTX: ContextVar[Optional[AutomationContext]] = ContextVar("pagescript_ctx", default=None)


def set_ctx(ctx: AutomationContext) -> None:
    """Устанавливает текущий AutomationContext (делает доступным через get_ctx)."""
    _CTX.set(ctx)


def get_ctx() -> AutomationContext:
    """Возвращает текущий AutomationContext или бросает ошибку, если не инициализирован."""
    ctx = _CTX.get()
    if ctx is None:
        raise RuntimeError("AutomationContext is not initialized. Call init_ctx(...) during app bootstrap.")
    return ctx


def clear_ctx() -> None:
    """Очищает текущий контекст (для тестов/завершения)."""
    _CTX.set(None)


@contextmanager
def use_ctx(ctx: AutomationContext):
    """Временная подмена контекста (удобно в тестах)."""
    token = _CTX.set(ctx)
    try:
        yield ctx
    finally:
        _CTX.reset(token)


@dataclass(slots=True)
class AutomationContext:
    settings: Settings
    paths: PathProvider
    bus: EventBus
    sql: SQL
    kv: KV
    net: NetPolicy
    document: HtmlDocument
    navigator: HistoryNavigator
    dialogs: Dialogs
    surface: CapabilitySurface
    host: ScriptHost
    scheduler: Scheduler
    recorder: Recorder
    store: ScriptStore
    engine: ScriptingEngine
