# src/pagescript/domain/scripts.py
from __future__ import annotations
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ScriptKind = Literal["template", "script", "macro"]


class Script(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    code: str
    kind: ScriptKind = "script"

    @field_validator("id")
    @classmethod
    def id_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("script id must not be empty")
        return v


class Macro(Script):
    kind: ScriptKind = "macro"
    created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
