# src/pagescript/services/scheduler.py
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, Set

from pagescript.ports import EventBus
from pagescript.services.eventbus import emit

_log = logging.getLogger("pagescript.scheduler")


class Executor(Protocol):
    async def execute(self, code: str, *, name: Optional[str] = None) -> Any: ...


@dataclass(slots=True)
class ScheduledTask:
    name: str
    code: str
    interval_ms: int
    timer: Optional[asyncio.Task] = field(default=None, repr=False)
    runs: int = 0
    failures: int = 0
    last_run_ts: Optional[float] = None
    last_error: Optional[str] = None

    def snapshot(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "interval_ms": self.interval_ms,
            "runs": self.runs,
            "failures": self.failures,
            "last_run_ts": self.last_run_ts,
            "last_error": self.last_error,
        }


class Scheduler:
    """
    Именованные периодические задачи.
      - schedule(name, ...) заменяет прежнюю задачу с тем же именем (не копит таймеры)
      - тик запускает host.execute(code) отдельной задачей: медленный прогон не сдвигает следующий тик
      - упавший тик логируется и запоминается в last_error; задача продолжает работать
      - unschedule() отменяет только будущие тики, уже идущие прогоны не прерываются
    """

    def __init__(self, host: Executor, *, bus: Optional[EventBus] = None) -> None:
        self._host = host
        self._bus = bus
        self._tasks: Dict[str, ScheduledTask] = {}
        self._inflight: Set[asyncio.Task] = set()

    # ---------- API ----------

    def schedule(self, name: str, code: str, interval_ms: int) -> ScheduledTask:
        name = (name or "").strip()
        if not name:
            raise ValueError("task name must not be empty")
        if isinstance(interval_ms, bool) or not isinstance(interval_ms, int) or interval_ms <= 0:
            raise ValueError(f"interval_ms must be a positive integer, got {interval_ms!r}")

        loop = asyncio.get_running_loop()
        replaced = self._cancel_timer(name)
        task = ScheduledTask(name=name, code=code, interval_ms=interval_ms)
        # между снятием старого таймера и установкой нового нет await
        self._tasks[name] = task
        task.timer = loop.create_task(self._timer(task), name=f"pagescript.timer:{name}")

        _log.info("scheduler.scheduled", extra={"extra": {"task": name, "interval_ms": interval_ms, "replaced": replaced}})
        emit(self._bus, "scheduler.scheduled", {"name": name, "interval_ms": interval_ms, "replaced": replaced}, "scheduler")
        return task

    def unschedule(self, name: str) -> bool:
        if not self._cancel_timer(name):
            return False
        _log.info("scheduler.unscheduled", extra={"extra": {"task": name}})
        emit(self._bus, "scheduler.unscheduled", {"name": name}, "scheduler")
        return True

    def list(self) -> list[str]:
        return list(self._tasks)

    def get(self, name: str) -> Optional[ScheduledTask]:
        return self._tasks.get(name)

    def last_error(self, name: str) -> Optional[str]:
        task = self._tasks.get(name)
        return task.last_error if task else None

    def info(self) -> list[Dict[str, Any]]:
        return [t.snapshot() for t in self._tasks.values()]

    async def shutdown(self, *, wait_inflight: bool = True) -> None:
        timers = []
        for name in list(self._tasks):
            task = self._tasks.pop(name)
            if task.timer is not None:
                task.timer.cancel()
                timers.append(task.timer)
        if timers:
            await asyncio.gather(*timers, return_exceptions=True)
        if wait_inflight and self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    # ---------- внутренняя логика ----------

    def _cancel_timer(self, name: str) -> bool:
        task = self._tasks.pop(name, None)
        if task is None:
            return False
        if task.timer is not None:
            task.timer.cancel()
            task.timer = None
        return True

    async def _timer(self, task: ScheduledTask) -> None:
        loop = asyncio.get_running_loop()
        interval = task.interval_ms / 1000
        deadline = loop.time() + interval
        while True:
            await asyncio.sleep(max(0.0, deadline - loop.time()))
            # задача могла быть заменена между пробуждением и этим местом
            if self._tasks.get(task.name) is not task:
                return
            run = loop.create_task(self._tick(task), name=f"pagescript.tick:{task.name}")
            self._inflight.add(run)
            run.add_done_callback(self._inflight.discard)
            deadline += interval
            now = loop.time()
            if deadline < now:
                # пропущенные тики не догоняем пачкой
                deadline = now + interval

    async def _tick(self, task: ScheduledTask) -> None:
        task.runs += 1
        task.last_run_ts = time.time()
        try:
            await self._host.execute(task.code, name=task.name)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            task.failures += 1
            task.last_error = str(exc)
            _log.error(
                "scheduler.tick.failed",
                extra={"extra": {"task": task.name, "error": str(exc), "failures": task.failures}},
            )
            emit(self._bus, "scheduler.tick.failed", {"name": task.name, "error": str(exc)}, "scheduler")
