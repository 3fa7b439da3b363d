from .store import ScriptStore
from .templates import builtin_templates

__all__ = ["ScriptStore", "builtin_templates"]
