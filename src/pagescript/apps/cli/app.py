# src/pagescript/apps/cli/app.py
from __future__ import annotations

import functools
import os
import shutil
import traceback
from typing import Optional

from dotenv import load_dotenv, find_dotenv
import typer

# загружаем .env один раз (PAGESCRIPT_*)
load_dotenv(find_dotenv(usecwd=True))

from pagescript.services.settings import Settings
from pagescript.apps.bootstrap import init_ctx, get_ctx, reload_ctx
from pagescript.apps.cli.commands import script as script_cmd, scripts as scripts_cmd, schedule as schedule_cmd

app = typer.Typer(help="pagescript: скрипты автоматизации страниц, макросы и периодические задачи")

# -------- вспомогательные --------


def _run_safe(func):
    # wraps: typer читает параметры через __wrapped__
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception:
            if os.getenv("PAGESCRIPT_CLI_DEBUG") == "1":
                traceback.print_exc()
            raise

    return wrapper


# -------- корневой callback (composition root) --------


@app.callback()
@_run_safe
def main(
    ctx: typer.Context,
    base_dir: Optional[str] = typer.Option(None, "--base-dir", help="Базовый каталог (по умолчанию ~/.pagescript или из .env/ENV)"),
    profile: Optional[str] = typer.Option(None, "--profile", help="Профиль настроек"),
    strict: Optional[bool] = typer.Option(None, "--strict/--no-strict", help="Ограниченный набор builtins для скриптов"),
    reload: bool = typer.Option(False, "--reload", help="Пересобрать контекст с новыми настройками"),
):
    """
    Вызывается перед любыми подкомандами: строит (или пересобирает) контекст.
    """
    # 1) читаем базовые настройки (константы/.env/ENV)
    settings = Settings.from_sources()

    # 2) применяем CLI-переопределения только к безопасным полям
    settings = settings.with_overrides(base_dir=base_dir, profile=profile, strict_sandbox=strict)

    # 3) создать/пересобрать единый контекст процесса
    if reload:
        reload_ctx(base_dir=base_dir, profile=profile, strict_sandbox=strict)
    else:
        init_ctx(settings)


# -------- команды обслуживания --------


@app.command("reset")
def reset():
    """Сброс окружения (удаляет base_dir)."""
    base_dir = get_ctx().paths.base_dir()
    if base_dir.exists():
        shutil.rmtree(base_dir)
        typer.echo("Окружение удалено.")
    else:
        typer.echo("Окружение не найдено.")


@app.command("where")
def where():
    ctx = get_ctx()
    print("base_dir:", ctx.settings.base_dir)
    print("database:", ctx.sql.path)
    print("logs:", ctx.paths.logs_dir())


# -------- подкоманды --------

app.command("run")(script_cmd.run)
app.command("eval")(script_cmd.eval_code)
app.command("schedule")(schedule_cmd.schedule)
app.add_typer(scripts_cmd.app, name="scripts")

if __name__ == "__main__":
    app()
