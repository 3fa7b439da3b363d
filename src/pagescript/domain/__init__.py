from .types import Event, ActionType, Modifiers, RecordedAction
from .scripts import Script, Macro, ScriptKind

__all__ = ["Event", "ActionType", "Modifiers", "RecordedAction", "Script", "Macro", "ScriptKind"]
