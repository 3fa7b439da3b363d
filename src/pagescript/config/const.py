# src/pagescript/config/const.py
from __future__ import annotations

# синтез макросов: паузы короче порога не воспроизводим, длинные обрезаем
WAIT_THRESHOLD_MS: int = 100
MAX_WAIT_MS: int = 2000

# история навигации на вкладку
HISTORY_LIMIT: int = 100
BLANK_URL: str = "about:blank"

DEFAULT_TASK_INTERVAL_MS: int = 5000
DEFAULT_NET_TIMEOUT_SEC: float = 30.0
DEFAULT_DATE_FORMAT: str = "%Y-%m-%d"

KV_NS_STORAGE: str = "storage"
KV_NS_SCRIPTS: str = "scripts"
