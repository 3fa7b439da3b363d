# src/pagescript/services/engine.py
"""
Public entry points of the scripting subsystem.

Every UI surface (editor, scheduler panel, recorder control, script library)
talks to :class:`ScriptingEngine`; the engine only wires the host, scheduler,
recorder and store together and publishes bus events.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from pagescript.domain import Macro, Script, ScriptKind
from pagescript.ports import EventBus
from pagescript.sdk.errors import ScriptNotFound
from pagescript.services.eventbus import emit
from pagescript.services.host import ScriptHost
from pagescript.services.recorder import Recorder
from pagescript.services.scheduler import ScheduledTask, Scheduler
from pagescript.services.scripts import ScriptStore

_log = logging.getLogger("pagescript.engine")


class ScriptingEngine:
    def __init__(
        self,
        host: ScriptHost,
        scheduler: Scheduler,
        recorder: Recorder,
        store: ScriptStore,
        *,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.host = host
        self.scheduler = scheduler
        self.recorder = recorder
        self.store = store
        self._bus = bus

    # ---------- editor ----------

    async def execute_script(self, code: str) -> Any:
        """Run editor text. Errors propagate to the caller."""
        return await self.host.execute(code, name="editor")

    async def run_script(self, script_id: str) -> Any:
        script = self.store.require(script_id)
        return await self.host.execute(script.code, name=script.id)

    def load_script(self, script_id: str) -> str:
        return self.store.load(script_id)

    def add_script(
        self,
        script_id: str,
        name: str,
        code: str,
        *,
        description: str = "",
        overwrite: bool = False,
    ) -> Script:
        return self.store.add(Script(id=script_id, name=name, code=code, description=description), overwrite=overwrite)

    def get_scripts(self, kind: Optional[ScriptKind] = None) -> list[Script]:
        return self.store.list(kind)

    # ---------- macros ----------

    def start_recording(self) -> None:
        self.recorder.start()

    def stop_recording(self) -> Tuple[Optional[str], Optional[Macro]]:
        """Stop the recorder; a non-empty recording is stored as a new macro."""
        script = self.recorder.stop()
        if script is None:
            return None, None
        macro = self.store.new_macro(script)
        emit(self._bus, "macro.recorded", {"id": macro.id, "name": macro.name}, "engine")
        return script, macro

    def _macro(self, macro_id: str) -> Macro:
        item = self.store.require(macro_id)
        if not isinstance(item, Macro):
            raise ScriptNotFound(macro_id)
        return item

    async def play_macro(self, macro_id: str) -> Any:
        macro = self._macro(macro_id)
        return await self.host.execute(macro.code, name=macro.id)

    def edit_macro(self, macro_id: str) -> str:
        return self._macro(macro_id).code

    def delete_macro(self, macro_id: str) -> bool:
        self._macro(macro_id)
        removed = self.store.remove(macro_id)
        if removed:
            emit(self._bus, "macro.deleted", {"id": macro_id}, "engine")
        return removed

    # ---------- scheduler ----------

    def schedule_task(self, name: str, code: str, interval_ms: int) -> ScheduledTask:
        return self.scheduler.schedule(name, code, interval_ms)

    def schedule_script(self, name: str, script_id: str, interval_ms: int) -> ScheduledTask:
        # код снимается в момент планирования: правка скрипта не меняет идущую задачу
        return self.scheduler.schedule(name, self.store.load(script_id), interval_ms)

    def unschedule_task(self, name: str) -> bool:
        return self.scheduler.unschedule(name)

    def tasks(self) -> list[str]:
        return self.scheduler.list()

    def task_info(self) -> list[Dict[str, Any]]:
        return self.scheduler.info()

    async def close(self) -> None:
        if self.recorder.is_recording:
            self.recorder.stop()
        await self.scheduler.shutdown()
        _log.info("engine.closed")
