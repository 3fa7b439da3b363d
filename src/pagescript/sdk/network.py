"""``network`` capability group built on httpx.

``fetch`` mirrors the browser call: ``options`` may carry ``method``,
``headers`` and ``body``. The response body is read eagerly, so ``text()`` and
``json()`` are plain calls.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import httpx

from pagescript.config import const
from pagescript.services.policy.net import NetPolicy

from ._surface import CapabilityGroup
from .errors import NetworkError, ParseError

_log = logging.getLogger("pagescript.network")


@dataclass(slots=True)
class NetworkResponse:
    ok: bool
    status: int
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    _content: bytes = field(default=b"", repr=False)
    _encoding: str = field(default="utf-8", repr=False)

    def text(self) -> str:
        return self._content.decode(self._encoding, errors="replace")

    def json(self) -> Any:
        try:
            return json.loads(self._content)
        except (TypeError, ValueError) as exc:
            raise ParseError("network.json", f"{self.url}: {exc}") from exc


class NetworkCapabilities:
    def __init__(
        self,
        *,
        policy: Optional[NetPolicy] = None,
        timeout: float = const.DEFAULT_NET_TIMEOUT_SEC,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._policy = policy or NetPolicy()
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport, follow_redirects=True)

    async def fetch(self, url: str, options: Optional[Mapping[str, Any]] = None) -> NetworkResponse:
        opts = dict(options or {})
        method = str(opts.get("method", "GET")).upper()
        headers = dict(opts.get("headers") or {})
        body = opts.get("body")
        if body is not None and not isinstance(body, (str, bytes)):
            try:
                body = json.dumps(body, ensure_ascii=False)
            except (TypeError, ValueError) as exc:
                raise NetworkError("network.fetch", url, f"body is not JSON-serializable ({exc})") from exc

        try:
            self._policy.require_url(url)
        except PermissionError as exc:
            raise NetworkError("network.fetch", url, str(exc)) from exc

        _log.debug("network.fetch", extra={"extra": {"method": method, "url": url}})
        try:
            async with self._client() as cli:
                r = await cli.request(method, url, headers=headers, content=body)
        except httpx.HTTPError as exc:
            raise NetworkError("network.fetch", url, f"{type(exc).__name__}: {exc}") from exc

        return NetworkResponse(
            ok=r.is_success,
            status=r.status_code,
            url=str(r.url),
            headers=dict(r.headers),
            _content=r.content,
            _encoding=r.encoding or "utf-8",
        )

    async def get(self, url: str) -> NetworkResponse:
        return await self.fetch(url)

    async def post(self, url: str, data: Any = None) -> NetworkResponse:
        try:
            body = json.dumps(data, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise NetworkError("network.post", url, f"body is not JSON-serializable ({exc})") from exc
        return await self.fetch(url, {"method": "POST", "headers": {"Content-Type": "application/json"}, "body": body})

    def group(self) -> CapabilityGroup:
        return CapabilityGroup("network", {"fetch": self.fetch, "get": self.get, "post": self.post})
