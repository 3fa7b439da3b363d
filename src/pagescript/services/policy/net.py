from __future__ import annotations
from typing import Iterable
from urllib.parse import urlparse


class NetPolicy:
    """
    Разрешённые/запрещённые хосты для network.*.
    Пустой allowlist: разрешено всё, кроме denylist.
    """

    def __init__(self, allowlist: Iterable[str] | None = None, denylist: Iterable[str] | None = None):
        self.allowset = {d.lower() for d in (allowlist or [])}
        self.denyset = {d.lower() for d in (denylist or [])}

    @staticmethod
    def _host_of(url: str) -> str:
        u = urlparse(url)
        if u.scheme not in ("http", "https"):
            return ""
        return (u.hostname or "").lower()

    def allow(self, *domains: str) -> None:
        self.allowset.update(d.lower() for d in domains)

    def deny(self, *domains: str) -> None:
        self.denyset.update(d.lower() for d in domains)

    def is_allowed_url(self, url: str) -> bool:
        host = self._host_of(url)
        if not host:  # не-http(s) схемы и относительные пути блокируем
            return False
        if host in self.denyset:
            return False
        if not self.allowset:
            return True
        return host in self.allowset

    def require_url(self, url: str) -> None:
        if not self.is_allowed_url(url):
            raise PermissionError(f"net policy: '{url}' is not allowed")
