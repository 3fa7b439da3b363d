# src/pagescript/services/host/interpreter.py
"""
Script host: turns script text into a coroutine bound to the capability surface.

The script body is parsed with :mod:`ast` and placed inside ``async def``, so
``await utils.wait(500)`` is legal at the top level and a final expression
statement becomes the return value. Names resolve against a per-call globals
table: capability groups first, then extra ambient globals, then builtins.
"""

from __future__ import annotations

import ast
import asyncio
import builtins
import itertools
import logging
import time
from dataclasses import dataclass
from types import CodeType, MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pagescript.ports import EventBus
from pagescript.sdk import CapabilitySurface
from pagescript.sdk.errors import CompileError, ScriptError
from pagescript.services.eventbus import emit

_log = logging.getLogger("pagescript.host")

_ENTRY = "__pagescript_main__"
_run_ids = itertools.count(1)

# strict-режим: только «чистые» builtins, без импорта/ввода-вывода/интроспекции
_SAFE_BUILTINS = (
    "abs all any ascii bin bool bytes callable chr dict divmod enumerate filter float "
    "format frozenset hash hex int isinstance issubclass iter len list map max min next "
    "object oct ord pow print range repr reversed round set slice sorted str sum tuple zip "
    "True False None Exception ArithmeticError AssertionError AttributeError IndexError "
    "KeyError LookupError NameError RuntimeError StopIteration StopAsyncIteration TypeError "
    "ValueError ZeroDivisionError"
).split()


def strict_builtins() -> Mapping[str, Any]:
    return MappingProxyType({name: getattr(builtins, name) for name in _SAFE_BUILTINS})


@dataclass(frozen=True, slots=True)
class CompiledScript:
    code: CodeType
    filename: str
    source: str


def compile_script(source: str, *, filename: str = "<script>") -> CompiledScript:
    """Parse ``source`` into an async unit. Raises :class:`CompileError`."""
    try:
        tree = ast.parse(source, filename=filename, mode="exec")
    except (SyntaxError, ValueError) as exc:
        raise CompileError(exc) from exc

    body = list(tree.body)
    if body and isinstance(body[-1], ast.Expr):
        last = body[-1]
        body[-1] = ast.copy_location(ast.Return(value=last.value), last)
    if not body:
        body = [ast.Pass()]

    wrapper = ast.parse(f"async def {_ENTRY}():\n    pass\n", filename=filename, mode="exec")
    fn = wrapper.body[0]
    assert isinstance(fn, ast.AsyncFunctionDef)
    fn.body = body
    ast.fix_missing_locations(wrapper)

    try:
        code = compile(wrapper, filename, "exec")
    except (SyntaxError, ValueError) as exc:
        raise CompileError(exc) from exc
    return CompiledScript(code=code, filename=filename, source=source)


class ScriptHost:
    """
    Исполнитель скриптов.
      - каждый execute() получает свежий globals (общих переменных между запусками нет)
      - capability-группы разделяются между запусками и неизменяемы
      - ошибки не глотаются: CompileError / ScriptError(cause=...)
    """

    def __init__(
        self,
        surface: CapabilitySurface,
        *,
        ambient: Optional[Mapping[str, Any]] = None,
        strict: bool = False,
        bus: Optional[EventBus] = None,
    ) -> None:
        self._surface = surface
        self._ambient = dict(ambient or {})
        self._strict = strict
        self._bus = bus

    def compile(self, code: str, *, filename: str = "<script>") -> CompiledScript:
        return compile_script(code, filename=filename)

    def _namespace(self) -> Dict[str, Any]:
        ns: Dict[str, Any] = {
            "__name__": "__script__",
            "__builtins__": dict(strict_builtins()) if self._strict else builtins,
        }
        if not self._strict:
            ns.update(self._ambient)
        # capability-группы перекрывают всё остальное
        ns.update(self._surface)
        return ns

    async def execute(self, code: str | CompiledScript, *, name: Optional[str] = None) -> Any:
        run_id = next(_run_ids)
        label = name or f"script-{run_id}"
        payload = {"run": run_id, "name": label}
        if isinstance(code, CompiledScript):
            compiled = code
        else:
            try:
                compiled = self.compile(code, filename=f"<{label}>")
            except CompileError as err:
                self._failed(payload, err, time.monotonic())
                raise
        return await self._run(compiled, payload)

    async def _run(self, compiled: CompiledScript, payload: Dict[str, Any]) -> Any:
        ns = self._namespace()
        started = time.monotonic()
        try:
            emit(self._bus, "script.started", payload, "host")
            exec(compiled.code, ns)
            result = await ns[_ENTRY]()
        except asyncio.CancelledError:
            emit(self._bus, "script.cancelled", payload, "host")
            raise
        except ScriptError as exc:
            # вложенный execute(): не оборачиваем второй раз
            self._failed(payload, exc, started)
            raise
        except BaseException as exc:
            # exit() / SystemExit / KeyboardInterrupt из скрипта не должны уронить цикл
            err = ScriptError(exc)
            self._failed(payload, err, started)
            raise err from exc
        emit(self._bus, "script.completed", {**payload, "elapsed_ms": _elapsed_ms(started)}, "host")
        return result

    def _failed(self, payload: Dict[str, Any], err: ScriptError, started: float) -> None:
        _log.warning(
            "script.failed",
            extra={"extra": {**payload, "error": str(err), "cause": type(err.cause).__name__}},
        )
        emit(self._bus, "script.failed", {**payload, "error": str(err), "elapsed_ms": _elapsed_ms(started)}, "host")


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
