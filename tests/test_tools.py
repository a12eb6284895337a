"""
Tool handler tests against a FakeDriver session.
"""

from __future__ import annotations

import base64
from pathlib import Path

import pytest
from selenium.webdriver.common.by import By
from selenium.webdriver.common.keys import Keys

from mcp_servers.tauri.context import ServerContext
from mcp_servers.tauri.errors import InvalidArgumentError
from mcp_servers.tauri.main import McpServer
from mcp_servers.tauri.server.handlers.actions import resolve_key
from mcp_servers.tauri.shutdown import ShutdownCoordinator

from conftest import FakeDriver, FakeElement


@pytest.fixture
def driver(ctx: ServerContext) -> FakeDriver:
    d = FakeDriver()
    ctx.sessions.create(d)
    return d


@pytest.fixture
def server(ctx: ServerContext) -> McpServer:
    return McpServer(ctx, coordinator=ShutdownCoordinator(ctx.sessions, ctx.launcher, exit_func=lambda code: None))


def test_navigate(server: McpServer, driver: FakeDriver) -> None:
    result = server.call_tool("navigate", {"url": "tauri://localhost/about"})
    assert result.first_text == "Navigated to tauri://localhost/about"
    assert driver.visited == ["tauri://localhost/about"]


def test_get_title(server: McpServer, driver: FakeDriver) -> None:
    assert server.call_tool("get_title", {}).first_text == "Page title: Test App"


def test_click_element(server: McpServer, driver: FakeDriver) -> None:
    button = FakeElement("Save", tag_name="button")
    driver.elements[(By.ID, "save")] = button
    result = server.call_tool("click_element", {"by": "id", "value": "save"})
    assert not result.is_error
    assert result.first_text == "Element clicked"
    assert button.calls == [("click", ())]


def test_send_keys_clears_first(server: McpServer, driver: FakeDriver) -> None:
    field = FakeElement(tag_name="input")
    driver.elements[(By.CSS_SELECTOR, "input[name=q]")] = field
    result = server.call_tool("send_keys", {"by": "css", "value": "input[name=q]", "text": "tauri"})
    assert result.first_text == 'Text "tauri" entered into element'
    assert field.calls == [("clear", ()), ("send_keys", ("tauri",))]


def test_element_reads(server: McpServer, driver: FakeDriver) -> None:
    driver.elements[(By.XPATH, "//h1")] = FakeElement("Welcome", attrs={"data-role": "title"}, tag_name="h1")
    loc = {"by": "xpath", "value": "//h1"}
    assert server.call_tool("get_element_text", loc).first_text == "Welcome"
    attr = server.call_tool("get_element_attribute", {**loc, "attribute": "data-role"})
    assert attr.first_text == "Attribute 'data-role': title"
    assert server.call_tool("get_element_tag_name", loc).first_text == "Element tag name: h1"
    assert server.call_tool("is_element_displayed", loc).first_text == "Element is displayed: True"
    rect = server.call_tool("get_element_rect", loc)
    assert rect.data == {"x": 1, "y": 2, "width": 30, "height": 40}


def test_find_elements_counts(server: McpServer, driver: FakeDriver) -> None:
    driver.elements[(By.CLASS_NAME, "row")] = FakeElement()
    result = server.call_tool("find_elements", {"by": "class", "value": "row"})
    assert result.data == {"count": 1}


def test_missing_element_is_error_after_timeout(server: McpServer, driver: FakeDriver) -> None:
    result = server.call_tool("click_element", {"by": "id", "value": "ghost", "timeout": 10})
    assert result.is_error
    assert result.first_text.startswith("Error clicking element:")


def test_wait_for_title_contains(server: McpServer, driver: FakeDriver) -> None:
    assert server.call_tool("wait_for_title_contains", {"title": "Test"}).first_text == "Title now contains: Test"


def test_execute_script_formats_result(server: McpServer, driver: FakeDriver) -> None:
    driver.script_result = {"ready": True, "count": 3}
    result = server.call_tool("execute_script", {"script": "return window.__state", "args": [1, "a"]})
    assert result.first_text == 'Script executed. Result: {"ready": true, "count": 3}'
    assert driver.scripts == [("return window.__state", (1, "a"))]


def test_execute_script_rejects_non_array_args(server: McpServer, driver: FakeDriver) -> None:
    result = server.call_tool("execute_script", {"script": "return 1", "args": "nope"})
    assert result.is_error
    assert "args must be an array" in result.first_text
    assert driver.scripts == []


def test_scroll_by(server: McpServer, driver: FakeDriver) -> None:
    result = server.call_tool("scroll_by", {"x": 0, "y": 250})
    assert result.first_text == "Scrolled by x=0, y=250"
    assert driver.scripts == [("window.scrollBy(arguments[0], arguments[1]);", (0.0, 250.0))]


def test_press_key_sends_w3c_actions(server: McpServer, driver: FakeDriver) -> None:
    result = server.call_tool("press_key", {"key": "Enter"})
    assert result.first_text == "Key 'Enter' pressed"
    assert len(driver.commands) == 1
    _, params = driver.commands[0]
    keyboard = next(src for src in params["actions"] if src["type"] == "key")
    assert [(a["type"], a["value"]) for a in keyboard["actions"]] == [("keyDown", Keys.ENTER), ("keyUp", Keys.ENTER)]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("Enter", Keys.ENTER), ("ArrowUp", Keys.ARROW_UP), ("ctrl", Keys.CONTROL), ("page_down", Keys.PAGE_DOWN), ("a", "a")],
)
def test_resolve_key(raw: str, expected: str) -> None:
    assert resolve_key(raw) == expected


def test_resolve_key_rejects_unknown_names() -> None:
    with pytest.raises(InvalidArgumentError):
        resolve_key("Hyper")


def test_set_timeouts_converts_ms_to_seconds(server: McpServer, driver: FakeDriver) -> None:
    result = server.call_tool("set_timeouts", {"script": 30000, "implicit": 500})
    assert not result.is_error
    assert driver.timeouts_set == {"script": 30.0, "implicit": 0.5}


def test_screenshot_inline_and_to_file(server: McpServer, driver: FakeDriver, tmp_path: Path) -> None:
    inline = server.call_tool("take_screenshot", {})
    images = [c for c in inline.content if c.type == "image"]
    assert images and images[0].data == "aGVsbG8="

    out = tmp_path / "shots" / "main.png"
    saved = server.call_tool("take_screenshot", {"outputPath": str(out)})
    assert saved.first_text == f"Screenshot saved to {out}"
    assert out.read_bytes() == base64.b64decode("aGVsbG8=")
