from .console import ConsoleDialogs, ScriptedDialogs

__all__ = ["ConsoleDialogs", "ScriptedDialogs"]
