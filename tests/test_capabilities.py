# tests/test_capabilities.py
from __future__ import annotations
import random
from datetime import datetime

import pytest

from pagescript.adapters.navigation import HistoryNavigator
from pagescript.sdk import GROUPS, CapabilityGroup
from pagescript.sdk.errors import CapabilityError, ParseError, SelectorError, StorageError
from pagescript.sdk.utils import UtilsCapabilities


# ---------- surface ----------


def test_surface_exposes_five_groups(ctx):
    assert tuple(ctx.surface) == GROUPS
    assert isinstance(ctx.surface["dom"], CapabilityGroup)


def test_group_is_read_only_and_attribute_style(ctx):
    storage = ctx.surface["storage"]
    assert storage.get is storage["get"]
    assert "clear" in storage
    with pytest.raises(AttributeError):
        storage.get = lambda key: None
    with pytest.raises(AttributeError):
        storage.missing_op
    with pytest.raises(TypeError):
        ctx.surface["dom"] = None


# ---------- dom ----------


def test_get_text_of_missing_element_is_empty(ctx):
    assert ctx.surface["dom"].getText("#missing") == ""


def test_click_on_missing_element_is_noop(ctx):
    seen = []
    ctx.document.listen("click", seen.append)
    ctx.surface["dom"].click("#missing")
    assert seen == []


def test_click_dispatches_event(ctx):
    seen = []
    ctx.document.listen("click", seen.append)
    ctx.surface["dom"].click("#submit")
    assert len(seen) == 1 and seen[0].target.get("id") == "submit"


def test_type_sets_value_and_fires_input(ctx):
    dom = ctx.surface["dom"]
    seen = []
    ctx.document.listen("input", seen.append)
    dom.type('input[name="email"]', "john@example.com")
    dom.type(".notes", "hello")
    assert dom.getAttribute('input[name="email"]', "value") == "john@example.com"
    assert dom.getText(".notes") == "hello"
    assert [e.type for e in seen] == ["input", "input"]


def test_attributes(ctx):
    dom = ctx.surface["dom"]
    assert dom.getAttribute("img", "alt") == "Logo"
    assert dom.getAttribute(".notes", "class") == "notes"
    assert dom.getAttribute("#missing", "href") is None
    dom.setAttribute("#submit", "data-state", 3)
    assert dom.getAttribute("#submit", "data-state") == "3"


def test_select_all(ctx):
    links = ctx.surface["dom"].selectAll("a[href]")
    assert [a.get("href") for a in links] == ["/one", "/two"]
    assert ctx.surface["dom"].select("#nothing") is None


def test_malformed_selector_raises(ctx):
    with pytest.raises(SelectorError) as ei:
        ctx.surface["dom"].select("div[")
    assert isinstance(ei.value, CapabilityError)
    assert ei.value.selector == "div["


# ---------- utils ----------


def test_random_is_inclusive_and_swaps_bounds():
    utils = UtilsCapabilities(dialogs=None, rng=random.Random(7))
    values = {utils.random(5, 1) for _ in range(200)}
    assert values == {1, 2, 3, 4, 5}


def test_json_helpers(ctx):
    utils = ctx.surface["utils"]
    assert utils.parseJSON('{"a": [1, 2]}') == {"a": [1, 2]}
    assert utils.stringifyJSON({"a": [1, 2]}) == '{"a":[1,2]}'
    with pytest.raises(ParseError):
        utils.parseJSON("{bad json")
    with pytest.raises(CapabilityError):
        utils.stringifyJSON({"s": {1, 2}})


def test_format_date(ctx):
    utils = ctx.surface["utils"]
    assert utils.formatDate(datetime(2024, 3, 5, 12, 0)) == "2024-03-05"
    assert utils.formatDate("2024-03-05T10:00:00Z") == "2024-03-05"
    assert utils.formatDate(0) == "1970-01-01"
    with pytest.raises(CapabilityError):
        utils.formatDate("not a date")


def test_alert_and_prompt_use_dialogs(ctx):
    utils = ctx.surface["utils"]
    utils.alert("done")
    assert utils.prompt("answer?") == "42"
    assert utils.prompt("again?") is None
    assert ctx.dialogs.alerts == ["done"]
    assert ctx.dialogs.prompts == ["answer?", "again?"]


def test_log_publishes_event(ctx):
    seen = []
    ctx.bus.subscribe("script.log", lambda ev: seen.append(ev.payload["message"]))
    ctx.surface["utils"].log("hi")
    assert seen == ["hi"]


@pytest.mark.asyncio
async def test_wait_rejects_garbage(ctx):
    with pytest.raises(CapabilityError):
        await ctx.surface["utils"].wait("soon")


# ---------- storage ----------


def test_storage_roundtrip(ctx):
    storage = ctx.surface["storage"]
    storage.set("user", {"name": "Ann", "tags": ["a"]})
    assert storage.get("user") == {"name": "Ann", "tags": ["a"]}
    storage.remove("user")
    assert storage.get("user") is None


def test_storage_clear_is_scoped_to_its_namespace(ctx):
    ctx.engine.add_script("keep", "Keep", "1")
    storage = ctx.surface["storage"]
    storage.set("a", 1)
    storage.set("b", 2)
    storage.clear()
    assert storage.get("a") is None and storage.get("b") is None
    assert ctx.store.get("keep") is not None
    assert ctx.kv.namespaced("scripts").get("keep") is not None


def test_storage_rejects_unserializable(ctx):
    with pytest.raises(StorageError):
        ctx.surface["storage"].set("bad", object())


# ---------- navigation ----------


def test_navigation_history(ctx):
    nav = ctx.surface["navigation"]
    nav.navigate("https://a.example/")
    nav.navigate("https://b.example/")
    nav.back()
    assert nav.currentUrl() == "https://a.example/"
    nav.navigate("https://c.example/")
    nav.forward()
    assert nav.currentUrl() == "https://c.example/"
    assert nav.title() == "Test page"


def test_history_is_bounded():
    navigator = HistoryNavigator(history_limit=3)
    for i in range(5):
        navigator.navigate(f"https://site/{i}")
    assert navigator.history() == ["https://site/2", "https://site/3", "https://site/4"]
    assert navigator.back() and navigator.back()
    assert not navigator.back()


def test_tabs():
    navigator = HistoryNavigator()
    first = navigator.active_tab
    second = navigator.new_tab("https://x.example/")
    assert navigator.current_url() == "https://x.example/"
    navigator.activate(first)
    assert navigator.current_url() == "about:blank"
    navigator.activate(second)
    navigator.close_tab()
    assert navigator.active_tab == first
    navigator.close_tab()
    assert len(navigator.tabs()) == 1
    assert navigator.current_url() == "about:blank"
    assert second not in navigator.tabs()
