# src/pagescript/domain/types.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional


@dataclass(frozen=True, slots=True)
class Event:
    type: str
    payload: Mapping[str, Any]
    source: str
    ts: float


class ActionType(str, Enum):
    CLICK = "click"
    INPUT = "input"
    KEYPRESS = "keypress"


@dataclass(frozen=True, slots=True)
class Modifiers:
    ctrl: bool = False
    shift: bool = False
    alt: bool = False


@dataclass(slots=True)
class RecordedAction:
    """One captured interaction; lives only for the duration of a recording."""

    type: ActionType
    timestamp: float  # ms
    selector: Optional[str] = None
    value: Optional[str] = None
    key: Optional[str] = None
    code: Optional[str] = None
    modifiers: Modifiers = field(default_factory=Modifiers)
    x: Optional[int] = None
    y: Optional[int] = None
