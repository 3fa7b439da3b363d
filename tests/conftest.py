# tests/conftest.py
from __future__ import annotations
import os
from pathlib import Path

import pytest

from pagescript.adapters.dialogs import ScriptedDialogs
from pagescript.apps.bootstrap import init_ctx
from pagescript.services.automation_context import AutomationContext, clear_ctx
from pagescript.services.settings import Settings

PAGE = """
<html>
  <head><title>Test page</title></head>
  <body>
    <div id="app">
      <form id="login">
        <input name="name" type="text">
        <input name="email" type="email">
        <input name="phone" type="tel">
        <textarea class="notes"></textarea>
        <button id="submit" type="submit">Send</button>
      </form>
      <ul>
        <li><a href="/one">One</a></li>
        <li><a href="/two">Two</a></li>
      </ul>
      <p><span>first</span><span>second</span></p>
      <img src="/logo.png" alt="Logo">
    </div>
  </body>
</html>
"""


# ---------- отдельная фикстура tmp_base_dir (нужна тестам CLI) ----------
@pytest.fixture
def tmp_base_dir(tmp_path, monkeypatch) -> Path:
    base_dir = tmp_path / "base"
    monkeypatch.setenv("PAGESCRIPT_BASE_DIR", str(base_dir))
    monkeypatch.setenv("PAGESCRIPT_TESTING", "1")
    return base_dir


# ---------- фикстура CLI-приложения ----------
@pytest.fixture
def cli_app():
    from pagescript.apps.cli.app import app

    return app


@pytest.fixture
def page_html() -> str:
    return PAGE


# ---------- автofixture: поднимаем AutomationContext для каждого теста ----------
@pytest.fixture(autouse=True)
def ctx(tmp_path, monkeypatch) -> AutomationContext:
    base_dir = tmp_path / "base"
    monkeypatch.setenv("PAGESCRIPT_BASE_DIR", str(base_dir))
    monkeypatch.setenv("PAGESCRIPT_TESTING", "1")
    for key in ("PAGESCRIPT_STRICT", "PAGESCRIPT_NET_ALLOW", "PAGESCRIPT_NET_DENY", "PAGESCRIPT_DATE_FORMAT"):
        monkeypatch.delenv(key, raising=False)

    settings = Settings.from_sources(env_file=None).with_overrides(base_dir=str(base_dir), profile="test")
    # контекст целиком (SQLite, KV, логи, шина, документ, host, scheduler, recorder, store)
    context = init_ctx(settings, dialogs=ScriptedDialogs(answers=["42"]))
    context.document.load(PAGE)
    try:
        yield context
    finally:
        clear_ctx()
