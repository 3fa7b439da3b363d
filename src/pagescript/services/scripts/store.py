# src/pagescript/services/scripts/store.py
from __future__ import annotations

import logging
import time
from typing import Dict, Iterable, Optional

from pydantic import ValidationError

from pagescript.domain import Macro, Script, ScriptKind
from pagescript.ports import KV
from pagescript.sdk.errors import PagescriptError, ScriptExistsError, ScriptNotFound

from .templates import builtin_templates

_log = logging.getLogger("pagescript.scripts")


class ScriptStore:
    """
    Библиотека скриптов: шаблоны + пользовательские скрипты + записанные макросы.
      - шаблоны приходят из ресурса и не сохраняются в KV
      - скрипты и макросы пишутся в KV (model_dump) и читаются обратно при создании
      - add() без overwrite не перетирает существующий id
    """

    def __init__(self, kv: Optional[KV] = None, *, templates: Optional[Iterable[Script]] = None) -> None:
        self._kv = kv
        self._items: Dict[str, Script] = {}
        for tpl in builtin_templates() if templates is None else templates:
            self._items[tpl.id] = tpl
        self._macro_seq = 0
        if kv is not None:
            self._restore(kv)

    def _restore(self, kv: KV) -> None:
        for key in kv.keys():
            raw = kv.get(key)
            try:
                item = Macro.model_validate(raw) if (raw or {}).get("kind") == "macro" else Script.model_validate(raw)
            except (ValidationError, AttributeError) as exc:
                _log.warning("scripts.restore.skipped", extra={"extra": {"id": key, "error": str(exc)}})
                continue
            if item.kind == "template":
                continue
            self._items[item.id] = item
            if isinstance(item, Macro):
                self._macro_seq += 1

    # ---------- API ----------

    def add(self, script: Script, *, overwrite: bool = False) -> Script:
        current = self._items.get(script.id)
        if current is not None and not overwrite:
            raise ScriptExistsError(script.id)
        if current is not None and current.kind == "template":
            raise PagescriptError(f"template cannot be replaced: {script.id}")
        self._items[script.id] = script
        if self._kv is not None and script.kind != "template":
            self._kv.set(script.id, script.model_dump(mode="json"))
        _log.info("scripts.added", extra={"extra": {"id": script.id, "kind": script.kind}})
        return script

    def get(self, script_id: str) -> Optional[Script]:
        return self._items.get(script_id)

    def require(self, script_id: str) -> Script:
        item = self._items.get(script_id)
        if item is None:
            raise ScriptNotFound(script_id)
        return item

    def list(self, kind: Optional[ScriptKind] = None) -> list[Script]:
        return [s for s in self._items.values() if kind is None or s.kind == kind]

    def load(self, script_id: str) -> str:
        return self.require(script_id).code

    def remove(self, script_id: str) -> bool:
        item = self._items.get(script_id)
        if item is None:
            return False
        if item.kind == "template":
            raise PagescriptError(f"template cannot be removed: {script_id}")
        del self._items[script_id]
        if self._kv is not None:
            self._kv.delete(script_id)
        _log.info("scripts.removed", extra={"extra": {"id": script_id}})
        return True

    def new_macro(self, code: str, *, name: Optional[str] = None) -> Macro:
        self._macro_seq += 1
        macro_id = f"macro_{int(time.time() * 1000)}"
        # два макроса в одну миллисекунду
        while macro_id in self._items:
            macro_id += "_"
        macro = Macro(id=macro_id, name=name or f"Recorded Macro {self._macro_seq}", code=code)
        return self.add(macro)

    def __contains__(self, script_id: object) -> bool:
        return script_id in self._items

    def __len__(self) -> int:
        return len(self._items)
