"""Dialog adapters used by ``utils.alert`` / ``utils.prompt``."""

from __future__ import annotations

import os
from collections import deque
from typing import Iterable, Optional

import typer

from pagescript.ports import Dialogs


class ConsoleDialogs(Dialogs):
    """Terminal dialogs: alert echoes, prompt reads a line (empty input -> ``None``)."""

    def alert(self, message: str) -> None:
        if os.getenv("PAGESCRIPT_TESTING"):
            return
        typer.echo(f"[alert] {message}")

    def prompt(self, message: str) -> Optional[str]:
        if os.getenv("PAGESCRIPT_TESTING"):
            return None
        value = typer.prompt(message, default="", show_default=False)
        return value or None


class ScriptedDialogs(Dialogs):
    """Non-interactive dialogs: answers prompts from a queue, remembers alerts."""

    def __init__(self, answers: Iterable[Optional[str]] = ()) -> None:
        self.alerts: list[str] = []
        self.prompts: list[str] = []
        self._answers = deque(answers)

    def alert(self, message: str) -> None:
        self.alerts.append(message)

    def prompt(self, message: str) -> Optional[str]:
        self.prompts.append(message)
        return self._answers.popleft() if self._answers else None
