# src/pagescript/services/scripts/templates.py
from __future__ import annotations

import importlib.resources as ir
from functools import lru_cache
from typing import Tuple

import yaml

from pagescript.domain import Script

_RESOURCE = "templates.yaml"


@lru_cache(maxsize=1)
def builtin_templates() -> Tuple[Script, ...]:
    """Шаблоны из пакетного ресурса ``pagescript.resources/templates.yaml``."""
    text = (ir.files("pagescript.resources") / _RESOURCE).read_text(encoding="utf-8")
    items = yaml.safe_load(text) or []
    if not isinstance(items, list):
        raise ValueError(f"{_RESOURCE}: expected a list of templates")
    return tuple(Script.model_validate({**item, "kind": "template"}) for item in items)
