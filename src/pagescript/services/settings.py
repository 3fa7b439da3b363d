# src/pagescript/services/settings.py
from __future__ import annotations
from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Optional, Dict

from pagescript.config import const


def _parse_env_file(path: str) -> Dict[str, str]:
    data: Dict[str, str] = {}
    p = Path(path)
    if not p.exists():
        return data
    for line in p.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" in line:
            k, v = line.split("=", 1)
            data[k.strip()] = v.strip().strip('"').strip("'")
    return data


def _split_hosts(raw: str) -> tuple[str, ...]:
    return tuple(h.strip().lower() for h in raw.split(",") if h.strip())


def _flag(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class Settings:
    base_dir: Path
    package_dir: Path = Path(__file__).resolve().parent.parent
    profile: str = "default"
    log_level: str = "INFO"

    # host
    strict_sandbox: bool = False

    # recorder
    wait_threshold_ms: int = const.WAIT_THRESHOLD_MS
    max_wait_ms: int = const.MAX_WAIT_MS

    # capabilities
    net_timeout_sec: float = const.DEFAULT_NET_TIMEOUT_SEC
    net_allow: tuple[str, ...] = ()
    net_deny: tuple[str, ...] = ()
    date_format: str = const.DEFAULT_DATE_FORMAT

    @staticmethod
    def from_sources(env_file: Optional[str] = ".env") -> "Settings":
        env_file_vars = _parse_env_file(env_file) if env_file else {}

        def pick_env(key: str, default: Optional[str] = None) -> str:
            return os.environ.get(key) or env_file_vars.get(key) or (default or "")

        override_base = pick_env("PAGESCRIPT_BASE_DIR")
        if override_base:
            base = Path(override_base).expanduser().resolve()
        else:
            base = (Path.home() / ".pagescript").resolve()

        timeout_raw = pick_env("PAGESCRIPT_NET_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else const.DEFAULT_NET_TIMEOUT_SEC
        except ValueError:
            timeout = const.DEFAULT_NET_TIMEOUT_SEC

        return Settings(
            base_dir=base,
            profile=pick_env("PAGESCRIPT_PROFILE", "default"),
            log_level=pick_env("PAGESCRIPT_LOG_LEVEL", "INFO"),
            strict_sandbox=_flag(pick_env("PAGESCRIPT_STRICT", "0")),
            net_timeout_sec=timeout,
            net_allow=_split_hosts(pick_env("PAGESCRIPT_NET_ALLOW")),
            net_deny=_split_hosts(pick_env("PAGESCRIPT_NET_DENY")),
            date_format=pick_env("PAGESCRIPT_DATE_FORMAT", const.DEFAULT_DATE_FORMAT),
        )

    def with_overrides(self, **kw) -> "Settings":
        # перегружать можно ТОЛЬКО безопасные поля
        allowed = {"base_dir", "profile", "strict_sandbox", "log_level"}
        safe = {k: v for k, v in kw.items() if k in allowed and v is not None}
        if "base_dir" in safe:
            safe["base_dir"] = Path(safe["base_dir"]).expanduser().resolve()
        return replace(self, **safe)
