# tests/test_host.py
from __future__ import annotations
import asyncio

import pytest

from pagescript.sdk.errors import CompileError, ParseError, ScriptError
from pagescript.services.host import ScriptHost, compile_script


@pytest.mark.asyncio
async def test_final_expression_is_result(ctx):
    assert await ctx.host.execute("x = 2\nx * 21") == 42


@pytest.mark.asyncio
async def test_explicit_return_and_top_level_await(ctx):
    code = "await utils.wait(1)\nreturn navigation.currentUrl()"
    assert await ctx.host.execute(code) == "about:blank"


@pytest.mark.asyncio
async def test_empty_script_returns_none(ctx):
    assert await ctx.host.execute("") is None
    assert await ctx.host.execute("# only a comment\n") is None


@pytest.mark.asyncio
async def test_parse_error_is_wrapped_with_cause(ctx):
    with pytest.raises(ScriptError) as ei:
        await ctx.host.execute("storage.get(utils.parseJSON('{bad json'))")
    assert isinstance(ei.value.cause, ParseError)
    assert not isinstance(ei.value, CompileError)


@pytest.mark.asyncio
async def test_syntax_error_raises_compile_error(ctx):
    with pytest.raises(CompileError) as ei:
        await ctx.host.execute("dom.click(")
    assert isinstance(ei.value, ScriptError)
    assert isinstance(ei.value.cause, SyntaxError)


def test_compile_rejects_null_bytes():
    with pytest.raises(CompileError):
        compile_script("x = 1\x00")


@pytest.mark.asyncio
async def test_globals_are_fresh_per_call(ctx):
    await ctx.host.execute("leftover = 1")
    with pytest.raises(ScriptError) as ei:
        await ctx.host.execute("leftover")
    assert isinstance(ei.value.cause, NameError)


@pytest.mark.asyncio
async def test_capabilities_shadow_ambient(ctx):
    host = ScriptHost(ctx.surface, ambient={"dom": "shadowed", "answer": 42})
    assert await host.execute("answer") == 42
    assert await host.execute("dom.getText('title')") == "Test page"


@pytest.mark.asyncio
async def test_builtins_fall_through_by_default(ctx):
    assert await ctx.host.execute("len([1, 2, 3])") == 3
    assert await ctx.host.execute("import json\njson.dumps([1])") == "[1]"


@pytest.mark.asyncio
async def test_strict_mode_narrows_builtins(ctx):
    host = ScriptHost(ctx.surface, ambient={"extra": 1}, strict=True)
    assert await host.execute("sorted([3, 1, 2])") == [1, 2, 3]
    with pytest.raises(ScriptError):
        await host.execute("open('/etc/passwd')")
    with pytest.raises(ScriptError):
        await host.execute("import os")
    with pytest.raises(ScriptError):
        await host.execute("extra")


@pytest.mark.asyncio
async def test_cancellation_propagates_unwrapped(ctx):
    task = asyncio.ensure_future(ctx.host.execute("await utils.wait(10000)"))
    await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task


@pytest.mark.asyncio
async def test_bus_events_for_runs(ctx):
    seen: list[str] = []
    ctx.bus.subscribe("script.", lambda ev: seen.append(ev.type))
    await ctx.host.execute("1")
    with pytest.raises(ScriptError):
        await ctx.host.execute("1 / 0")
    assert seen == ["script.started", "script.completed", "script.started", "script.failed"]


@pytest.mark.asyncio
async def test_compiled_script_can_be_reused(ctx):
    compiled = ctx.host.compile("storage.set('n', (storage.get('n') or 0) + 1)\nstorage.get('n')")
    assert await ctx.host.execute(compiled) == 1
    assert await ctx.host.execute(compiled) == 2


@pytest.mark.parametrize("code", ["exit()", "raise SystemExit(3)", "import sys\nsys.exit('bye')", "raise KeyboardInterrupt"])
@pytest.mark.asyncio
async def test_interpreter_exit_is_wrapped(ctx, code):
    seen: list[str] = []
    ctx.bus.subscribe("script.", lambda ev: seen.append(ev.type))
    with pytest.raises(ScriptError) as ei:
        await ctx.host.execute(code)
    assert isinstance(ei.value.cause, (SystemExit, KeyboardInterrupt))
    assert seen == ["script.started", "script.failed"]
    # цикл жив: следующий запуск проходит
    assert await ctx.host.execute("1 + 1") == 2


@pytest.mark.asyncio
async def test_failing_subscriber_does_not_break_execute(ctx):
    def broken(ev):
        raise RuntimeError("subscriber down")

    ctx.bus.subscribe("script.", broken)
    assert await ctx.host.execute("6 * 7") == 42
