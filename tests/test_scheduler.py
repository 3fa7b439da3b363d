# tests/test_scheduler.py
from __future__ import annotations
import asyncio
import json
from pathlib import Path

import pytest

from pagescript.services.scheduler import Scheduler


class RecordingHost:
    def __init__(self, fail_on: str | None = None) -> None:
        self.calls: list[str] = []
        self.fail_on = fail_on

    async def execute(self, code: str, *, name=None):
        self.calls.append(code)
        if code == self.fail_on:
            raise RuntimeError("tick failed")


@pytest.mark.asyncio
async def test_schedule_list_unschedule(ctx):
    sch = ctx.scheduler
    sch.schedule("ping", "utils.log('hi')", 1000)
    assert sch.list() == ["ping"]
    assert sch.unschedule("ping") is True
    assert sch.list() == []
    assert sch.unschedule("ping") is False


@pytest.mark.asyncio
async def test_reschedule_replaces_task():
    host = RecordingHost()
    sch = Scheduler(host)
    sch.schedule("job", "first", 10)
    sch.schedule("job", "second", 20)
    assert sch.list() == ["job"]
    assert sch.get("job").interval_ms == 20
    await asyncio.sleep(0.075)
    await sch.shutdown()
    assert host.calls and set(host.calls) == {"second"}
    assert 1 <= len(host.calls) <= 4


@pytest.mark.asyncio
async def test_unschedule_stops_ticks():
    host = RecordingHost()
    sch = Scheduler(host)
    sch.schedule("job", "code", 10)
    await asyncio.sleep(0.035)
    sch.unschedule("job")
    seen = len(host.calls)
    assert seen >= 1
    await asyncio.sleep(0.05)
    assert len(host.calls) == seen


@pytest.mark.asyncio
async def test_failing_tick_keeps_task_alive():
    host = RecordingHost(fail_on="boom")
    sch = Scheduler(host)
    sch.schedule("job", "boom", 10)
    await asyncio.sleep(0.055)
    task = sch.get("job")
    assert task is not None and task.timer is not None and not task.timer.done()
    assert task.failures >= 2 and task.runs == task.failures
    assert sch.last_error("job") == "tick failed"
    await sch.shutdown()
    assert sch.list() == []


@pytest.mark.asyncio
async def test_script_failure_is_logged_and_recorded(ctx):
    ctx.scheduler.schedule("bad", "utils.parseJSON('{nope')", 10)
    await asyncio.sleep(0.035)
    info = {t["name"]: t for t in ctx.engine.task_info()}
    await ctx.scheduler.shutdown()
    assert info["bad"]["failures"] >= 1
    assert "ParseError" in info["bad"]["last_error"]

    log = Path(ctx.paths.logs_dir()) / "pagescript.log"
    records = [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]
    assert any(r["msg"] == "scheduler.tick.failed" and r["task"] == "bad" for r in records)


@pytest.mark.asyncio
async def test_slow_tick_does_not_delay_next_one():
    started: list[float] = []

    class SlowHost:
        async def execute(self, code, *, name=None):
            started.append(asyncio.get_running_loop().time())
            await asyncio.sleep(0.05)

    sch = Scheduler(SlowHost())
    sch.schedule("slow", "x", 10)
    await asyncio.sleep(0.045)
    await sch.shutdown(wait_inflight=False)
    assert len(started) >= 2


@pytest.mark.parametrize("interval", [0, -5, 1.5, "100", True])
@pytest.mark.asyncio
async def test_invalid_interval_rejected(interval):
    sch = Scheduler(RecordingHost())
    with pytest.raises(ValueError):
        sch.schedule("job", "code", interval)
    assert sch.list() == []


@pytest.mark.asyncio
async def test_empty_name_rejected():
    with pytest.raises(ValueError):
        Scheduler(RecordingHost()).schedule("  ", "code", 10)


def test_schedule_needs_running_loop():
    with pytest.raises(RuntimeError):
        Scheduler(RecordingHost()).schedule("job", "code", 10)


@pytest.mark.asyncio
async def test_exiting_script_keeps_task_alive(ctx):
    ctx.scheduler.schedule("quit", "exit()", 10)
    await asyncio.sleep(0.045)
    task = ctx.scheduler.get("quit")
    assert task is not None and not task.timer.done()
    assert task.failures >= 2 and task.runs == task.failures
    assert "SystemExit" in task.last_error
    await ctx.scheduler.shutdown()
