# src/pagescript/apps/cli/commands/script.py
from __future__ import annotations
import asyncio
from pathlib import Path
from typing import Any, Optional

import typer
from rich import print
from rich.markup import escape

from pagescript.apps.bootstrap import get_ctx
from pagescript.sdk.errors import CompileError, ScriptError


def _show_result(result: Any) -> None:
    if result is not None:
        print(f"[green]=>[/green] {escape(repr(result))}")


def _execute(code: str, name: str) -> None:
    ctx = get_ctx()
    try:
        result = asyncio.run(ctx.host.execute(code, name=name))
    except CompileError as e:
        print(f"[red]Ошибка компиляции:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except ScriptError as e:
        print(f"[red]Ошибка скрипта:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    _show_result(result)


def run(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Файл скрипта"),
    html: Optional[Path] = typer.Option(None, "--html", exists=True, dir_okay=False, help="HTML-страница для dom.*"),
    url: Optional[str] = typer.Option(None, "--url", help="Текущий адрес вкладки"),
):
    """Выполнить скрипт из файла."""
    ctx = get_ctx()
    if html is not None:
        ctx.document.load(html.read_text(encoding="utf-8"))
    if url:
        ctx.navigator.navigate(url)
    _execute(file.read_text(encoding="utf-8"), name=file.stem)


def eval_code(code: str = typer.Argument(..., help="Текст скрипта")):
    """Выполнить скрипт из аргумента командной строки."""
    _execute(code, name="eval")
