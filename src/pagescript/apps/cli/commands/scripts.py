# src/pagescript/apps/cli/commands/scripts.py
from __future__ import annotations
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.markup import escape

from pagescript.apps.bootstrap import get_ctx
from pagescript.sdk.errors import PagescriptError, ScriptExistsError, ScriptNotFound

app = typer.Typer(help="Библиотека скриптов: шаблоны, скрипты, макросы")


@app.command("list")
def list_scripts(kind: Optional[str] = typer.Option(None, "--kind", help="template | script | macro")):
    if kind is not None and kind not in {"template", "script", "macro"}:
        raise typer.BadParameter("Allowed: template, script, macro")
    items = get_ctx().store.list(kind)
    if not items:
        print("[yellow]Скриптов нет.[/yellow]")
        return
    for s in items:
        print(f"{s.id:24} [cyan]{s.kind:8}[/cyan] {escape(s.name)}")


@app.command("show")
def show(script_id: str):
    try:
        code = get_ctx().store.load(script_id)
    except ScriptNotFound as e:
        print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    typer.echo(code, nl=not code.endswith("\n"))


@app.command("add")
def add(
    script_id: str = typer.Argument(..., help="Идентификатор"),
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    name: Optional[str] = typer.Option(None, "--name"),
    description: str = typer.Option("", "--description"),
    force: bool = typer.Option(False, "--force", help="Перезаписать существующий"),
):
    ctx = get_ctx()
    try:
        s = ctx.engine.add_script(
            script_id,
            name or script_id,
            file.read_text(encoding="utf-8"),
            description=description,
            overwrite=force,
        )
    except ScriptExistsError as e:
        print(f"[red]{escape(str(e))}[/red] (используйте --force)")
        raise typer.Exit(1)
    except PagescriptError as e:
        print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    print(f"[green]Добавлен скрипт:[/green] {s.id}")


@app.command("remove")
def remove(script_id: str):
    try:
        removed = get_ctx().store.remove(script_id)
    except PagescriptError as e:
        print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    if not removed:
        print(f"[yellow]Скрипт не найден:[/yellow] {script_id}")
        raise typer.Exit(1)
    print(f"[green]Удалён скрипт:[/green] {script_id}")
