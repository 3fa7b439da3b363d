"""Error hierarchy shared by the capability surface, the host and the store."""

from __future__ import annotations

from typing import Optional


class PagescriptError(RuntimeError):
    """Base class for all pagescript runtime errors."""


class CapabilityError(PagescriptError):
    """Raised when a capability call rejects (bad input, network, storage)."""

    def __init__(self, capability: str, detail: Optional[str] = None) -> None:
        self.capability = capability
        self.detail = detail
        message = f"{capability} failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ParseError(CapabilityError):
    """Raised when JSON text handed to a capability cannot be parsed."""


class SelectorError(CapabilityError):
    """Raised for a selector the DOM engine cannot understand."""

    def __init__(self, capability: str, selector: str, detail: Optional[str] = None) -> None:
        self.selector = selector
        super().__init__(capability, f"invalid selector {selector!r}" + (f" ({detail})" if detail else ""))


class NetworkError(CapabilityError):
    """Raised when a request cannot be sent or is refused by the net policy."""

    def __init__(self, capability: str, url: str, detail: Optional[str] = None) -> None:
        self.url = url
        super().__init__(capability, f"{url}: {detail}" if detail else url)


class StorageError(CapabilityError):
    """Raised when a value cannot be written to or read from script storage."""


class ScriptError(PagescriptError):
    """Raised by the host when a script fails; ``cause`` holds the original error."""

    def __init__(self, cause: BaseException, *, message: str | None = None) -> None:
        self.cause = cause
        super().__init__(message or f"{type(cause).__name__}: {cause}")


class CompileError(ScriptError):
    """Raised when script text cannot be turned into an invokable unit."""

    def __init__(self, cause: BaseException) -> None:
        lineno = getattr(cause, "lineno", None)
        msg = getattr(cause, "msg", None) or str(cause)
        where = f" (line {lineno})" if lineno else ""
        super().__init__(cause, message=f"compile error{where}: {msg}")


class ScriptExistsError(PagescriptError):
    """Raised when a script id is taken and overwrite was not requested."""

    def __init__(self, script_id: str) -> None:
        self.script_id = script_id
        super().__init__(f"script already exists: {script_id}")


class ScriptNotFound(PagescriptError, KeyError):
    """Raised when a script id is not registered in the store."""

    def __init__(self, script_id: str) -> None:
        self.script_id = script_id
        super().__init__(f"script not found: {script_id}")

    def __str__(self) -> str:
        return f"script not found: {self.script_id}"


__all__ = [
    "PagescriptError",
    "CapabilityError",
    "ParseError",
    "SelectorError",
    "NetworkError",
    "StorageError",
    "ScriptError",
    "CompileError",
    "ScriptExistsError",
    "ScriptNotFound",
]
