"""Turns a recorded action buffer into script text."""

from __future__ import annotations

from typing import Iterable, List

from pagescript.config import const
from pagescript.domain import ActionType, RecordedAction

HEADER = "# Auto-generated script"


def _line(action: RecordedAction) -> str | None:
    if action.type is ActionType.CLICK:
        return f"dom.click({action.selector!r})"
    if action.type is ActionType.INPUT:
        return f"dom.type({action.selector!r}, {action.value or ''!r})"
    if action.type is ActionType.KEYPRESS and action.key == "Enter":
        # у Enter нет capability, оставляем пометку
        return "# Press Enter"
    return None


def synthesize(
    actions: Iterable[RecordedAction],
    *,
    threshold_ms: int = const.WAIT_THRESHOLD_MS,
    max_wait_ms: int = const.MAX_WAIT_MS,
) -> str:
    """
    One line per click/input action, a comment for Enter, and
    ``await utils.wait(ms)`` between actions further apart than
    ``threshold_ms`` (capped at ``max_wait_ms``).
    """
    seq = list(actions)
    lines: List[str] = [HEADER, ""]
    for idx, action in enumerate(seq):
        line = _line(action)
        if line is not None:
            lines.append(line)
        if idx + 1 < len(seq):
            delay = int(seq[idx + 1].timestamp - action.timestamp)
            if delay > threshold_ms:
                lines.append(f"await utils.wait({min(delay, max_wait_ms)})")
    return "\n".join(lines) + "\n"
