"""``utils`` capability group."""

from __future__ import annotations

import asyncio
import json
import logging
import random as _random
from datetime import date, datetime, timezone
from typing import Any, Optional

from pagescript.config import const
from pagescript.ports import Dialogs, EventBus
from pagescript.services.eventbus import emit

from ._surface import CapabilityGroup
from .errors import CapabilityError, ParseError

_script_log = logging.getLogger("pagescript.script")


def _to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, bool):
        raise TypeError("bool is not a date")
    if isinstance(value, (int, float)):
        # epoch в миллисекундах, как Date.now()
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text)
    raise TypeError(f"unsupported date value: {type(value).__name__}")


class UtilsCapabilities:
    def __init__(
        self,
        *,
        dialogs: Dialogs,
        bus: Optional[EventBus] = None,
        date_format: str = const.DEFAULT_DATE_FORMAT,
        rng: Optional[_random.Random] = None,
    ) -> None:
        self._dialogs = dialogs
        self._bus = bus
        self._date_format = date_format
        self._rng = rng or _random.Random()

    async def wait(self, ms: float) -> None:
        """Suspend the calling script only; other scripts keep running."""
        try:
            delay = max(0.0, float(ms)) / 1000
        except (TypeError, ValueError) as exc:
            raise CapabilityError("utils.wait", f"invalid delay {ms!r}") from exc
        await asyncio.sleep(delay)

    def log(self, message: Any) -> None:
        text = message if isinstance(message, str) else repr(message)
        _script_log.info("[Script] %s", text)
        emit(self._bus, "script.log", {"message": text}, "utils")

    def alert(self, message: Any) -> None:
        self._dialogs.alert(str(message))

    def prompt(self, message: Any) -> Optional[str]:
        return self._dialogs.prompt(str(message))

    def random(self, min_value: int, max_value: int) -> int:
        try:
            lo, hi = int(min_value), int(max_value)
        except (TypeError, ValueError) as exc:
            raise CapabilityError("utils.random", str(exc)) from exc
        if lo > hi:
            lo, hi = hi, lo
        return self._rng.randint(lo, hi)

    def format_date(self, value: Any = None) -> str:
        try:
            dt = datetime.now() if value is None else _to_datetime(value)
        except (TypeError, ValueError, OverflowError, OSError) as exc:
            raise CapabilityError("utils.formatDate", str(exc)) from exc
        return dt.strftime(self._date_format)

    def parse_json(self, text: Any) -> Any:
        try:
            return json.loads(text)
        except (TypeError, ValueError) as exc:
            raise ParseError("utils.parseJSON", str(exc)) from exc

    def stringify_json(self, value: Any) -> str:
        try:
            return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            raise CapabilityError("utils.stringifyJSON", str(exc)) from exc

    def group(self) -> CapabilityGroup:
        return CapabilityGroup(
            "utils",
            {
                "wait": self.wait,
                "log": self.log,
                "alert": self.alert,
                "prompt": self.prompt,
                "random": self.random,
                "formatDate": self.format_date,
                "parseJSON": self.parse_json,
                "stringifyJSON": self.stringify_json,
            },
        )
