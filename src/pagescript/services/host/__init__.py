from .interpreter import ScriptHost, CompiledScript, compile_script, strict_builtins

__all__ = ["ScriptHost", "CompiledScript", "compile_script", "strict_builtins"]
