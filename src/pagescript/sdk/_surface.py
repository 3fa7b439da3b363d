"""Read-only containers that form the script-facing capability vocabulary."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping


class CapabilityGroup:
    """
    Flat ``name -> callable`` table reachable as attributes (``dom.click``) or
    items (``dom["click"]``).

    Not a ``Mapping``: ``storage.get`` and ``network.get`` resolve to
    operations, never to ``Mapping.get``. Only dunder methods live on the class.
    """

    __slots__ = ("_name", "_ops")

    def __init__(self, name: str, ops: Mapping[str, Callable[..., Any]]) -> None:
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_ops", MappingProxyType(dict(ops)))

    def __getattr__(self, op: str) -> Callable[..., Any]:
        if op.startswith("_"):
            raise AttributeError(op)
        try:
            return self._ops[op]
        except KeyError:
            raise AttributeError(f"'{self._name}' has no operation '{op}'") from None

    def __getitem__(self, op: str) -> Callable[..., Any]:
        return self._ops[op]

    def __contains__(self, op: object) -> bool:
        return op in self._ops

    def __iter__(self) -> Iterator[str]:
        return iter(self._ops)

    def __len__(self) -> int:
        return len(self._ops)

    def __setattr__(self, key: str, value: Any) -> None:
        raise AttributeError(f"capability group '{self._name}' is read-only")

    def __delattr__(self, key: str) -> None:
        raise AttributeError(f"capability group '{self._name}' is read-only")

    def __dir__(self) -> list[str]:
        return sorted(self._ops)

    def __repr__(self) -> str:
        return f"<capabilities {self._name}: {', '.join(self._ops)}>"


class CapabilitySurface(Mapping[str, CapabilityGroup]):
    """The complete set of groups handed to the script host; fixed after construction."""

    def __init__(self, groups: Mapping[str, CapabilityGroup]) -> None:
        self._groups = MappingProxyType(dict(groups))

    def __getitem__(self, name: str) -> CapabilityGroup:
        return self._groups[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    def __repr__(self) -> str:
        return f"<CapabilitySurface {', '.join(self._groups)}>"
