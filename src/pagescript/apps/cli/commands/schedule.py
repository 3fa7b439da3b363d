# src/pagescript/apps/cli/commands/schedule.py
from __future__ import annotations
import asyncio
from pathlib import Path

import typer
from rich import print
from rich.markup import escape

from pagescript.apps.bootstrap import get_ctx
from pagescript.config import const


def schedule(
    name: str = typer.Argument(..., help="Имя задачи"),
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Файл скрипта"),
    interval: int = typer.Option(const.DEFAULT_TASK_INTERVAL_MS, "--interval", min=1, help="Период, мс"),
    duration: float = typer.Option(10.0, "--duration", min=0.0, help="Сколько секунд держать задачу"),
):
    """Запустить скрипт как периодическую задачу на заданное время."""
    ctx = get_ctx()
    code = file.read_text(encoding="utf-8")

    async def _main() -> list[dict]:
        ctx.engine.schedule_task(name, code, interval)
        try:
            await asyncio.sleep(duration)
        finally:
            info = ctx.engine.task_info()
            await ctx.engine.close()
        return info

    try:
        info = asyncio.run(_main())
    except KeyboardInterrupt:
        print("[yellow]Прервано.[/yellow]")
        raise typer.Exit(130)
    for t in info:
        colour = "red" if t["failures"] else "green"
        print(f"[{colour}]{t['name']}[/{colour}] runs={t['runs']} failures={t['failures']} last_error={escape(t['last_error'] or '-')}")
