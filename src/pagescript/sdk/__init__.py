"""Script-facing capability surface.

Scripts see exactly five groups: ``navigation``, ``dom``, ``utils``,
``storage`` and ``network``. :func:`build_surface` wires them to the host
environment ports once at startup.
"""

from __future__ import annotations

from typing import Optional

import httpx

from pagescript.config import const
from pagescript.ports import Dialogs, Document, EventBus, KV, Navigator
from pagescript.services.policy.net import NetPolicy

from ._surface import CapabilityGroup, CapabilitySurface
from .dom import DomCapabilities
from .navigation import NavigationCapabilities
from .network import NetworkCapabilities, NetworkResponse
from .storage import StorageCapabilities
from .utils import UtilsCapabilities

GROUPS = ("navigation", "dom", "utils", "storage", "network")


def build_surface(
    *,
    navigator: Navigator,
    document: Document,
    dialogs: Dialogs,
    kv: KV,
    bus: Optional[EventBus] = None,
    net_policy: Optional[NetPolicy] = None,
    net_timeout: float = const.DEFAULT_NET_TIMEOUT_SEC,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    date_format: str = const.DEFAULT_DATE_FORMAT,
) -> CapabilitySurface:
    return CapabilitySurface(
        {
            "navigation": NavigationCapabilities(navigator).group(),
            "dom": DomCapabilities(document).group(),
            "utils": UtilsCapabilities(dialogs=dialogs, bus=bus, date_format=date_format).group(),
            "storage": StorageCapabilities(kv).group(),
            "network": NetworkCapabilities(policy=net_policy, timeout=net_timeout, transport=transport).group(),
        }
    )


__all__ = [
    "GROUPS",
    "CapabilityGroup",
    "CapabilitySurface",
    "NetworkResponse",
    "build_surface",
]
