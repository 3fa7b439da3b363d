# src/pagescript/services/recorder/recorder.py
from __future__ import annotations

import logging
import time
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, List, Optional

from bs4 import Tag

from pagescript.config import const
from pagescript.domain import ActionType, Modifiers, RecordedAction
from pagescript.ports import Document, DomEvent, EventBus
from pagescript.services.eventbus import emit

from .selector import generate_selector
from .synthesizer import synthesize

_log = logging.getLogger("pagescript.recorder")

_INPUT_TAGS = {"input", "textarea", "select"}


def _wall_ms() -> float:
    return time.time() * 1000


class RecorderState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"


@dataclass(slots=True)
class RecordingSession:
    script: Optional[str] = None
    actions: int = 0


class Recorder:
    """
    Запись действий пользователя в скрипт.
      - слушатели ставятся в capture-фазе: обработчики страницы не могут скрыть событие
      - все подписки живут в ExitStack и снимаются одним close() в stop()
      - повторный start() во время записи перезапускает буфер, не плодя слушателей
    """

    def __init__(
        self,
        document: Document,
        *,
        clock: Optional[Callable[[], float]] = None,
        threshold_ms: int = const.WAIT_THRESHOLD_MS,
        max_wait_ms: int = const.MAX_WAIT_MS,
        bus: Optional[EventBus] = None,
    ) -> None:
        self._doc = document
        self._clock = clock or _wall_ms
        self._threshold_ms = threshold_ms
        self._max_wait_ms = max_wait_ms
        self._bus = bus
        self._state = RecorderState.IDLE
        self._actions: List[RecordedAction] = []
        self._listeners: Optional[ExitStack] = None

    @property
    def state(self) -> RecorderState:
        return self._state

    @property
    def is_recording(self) -> bool:
        return self._state is RecorderState.RECORDING

    @property
    def actions(self) -> list[RecordedAction]:
        return list(self._actions)

    # ---------- жизненный цикл ----------

    def start(self) -> None:
        restarted = self._detach()
        self._actions = []
        stack = ExitStack()
        try:
            stack.callback(self._doc.listen("click", self._on_click, capture=True).close)
            stack.callback(self._doc.listen("input", self._on_input, capture=True).close)
            stack.callback(self._doc.listen("keydown", self._on_key, capture=True).close)
        except BaseException:
            stack.close()
            raise
        self._listeners = stack
        self._state = RecorderState.RECORDING
        _log.info("recorder.started", extra={"extra": {"restarted": restarted}})
        emit(self._bus, "recorder.started", {"restarted": restarted}, "recorder")

    def stop(self) -> Optional[str]:
        if not self._detach():
            return None
        actions, self._actions = self._actions, []
        _log.info("recorder.stopped", extra={"extra": {"actions": len(actions)}})
        emit(self._bus, "recorder.stopped", {"actions": len(actions)}, "recorder")
        if not actions:
            return None
        return synthesize(actions, threshold_ms=self._threshold_ms, max_wait_ms=self._max_wait_ms)

    @contextmanager
    def session(self) -> Iterator[RecordingSession]:
        """Record for the duration of a ``with`` block; listeners are always detached."""
        result = RecordingSession()
        self.start()
        try:
            yield result
        finally:
            result.actions = len(self._actions)
            result.script = self.stop()

    def _detach(self) -> bool:
        stack, self._listeners = self._listeners, None
        was_recording = self._state is RecorderState.RECORDING
        self._state = RecorderState.IDLE
        if stack is not None:
            stack.close()
        return was_recording

    # ---------- обработчики событий ----------

    def _record(self, action: RecordedAction) -> None:
        if self._state is RecorderState.RECORDING:
            self._actions.append(action)

    def _on_click(self, event: DomEvent) -> None:
        if not isinstance(event.target, Tag):
            return
        self._record(
            RecordedAction(
                type=ActionType.CLICK,
                timestamp=self._clock(),
                selector=generate_selector(event.target),
                x=event.x,
                y=event.y,
            )
        )

    def _on_input(self, event: DomEvent) -> None:
        target = event.target
        if not isinstance(target, Tag) or target.name not in _INPUT_TAGS:
            return
        value = self._doc.value_of(target)
        self._record(
            RecordedAction(
                type=ActionType.INPUT,
                timestamp=self._clock(),
                selector=generate_selector(target),
                value=value,
            )
        )

    def _on_key(self, event: DomEvent) -> None:
        self._record(
            RecordedAction(
                type=ActionType.KEYPRESS,
                timestamp=self._clock(),
                key=event.key,
                code=event.code,
                modifiers=Modifiers(ctrl=event.ctrl_key, shift=event.shift_key, alt=event.alt_key),
            )
        )
