"""Shared fakes: a WebDriver stand-in so tool tests never need tauri-driver."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from selenium.common.exceptions import NoSuchElementException, WebDriverException

from mcp_servers.tauri.config import TauriConfig
from mcp_servers.tauri.context import ServerContext
from mcp_servers.tauri.launcher import DriverLauncher, LaunchResult


class FakeElement:
    def __init__(self, text: str = "", attrs: dict[str, str] | None = None, tag_name: str = "div") -> None:
        self.text = text
        self.tag_name = tag_name
        self.attrs = attrs or {}
        self.calls: list[tuple[str, tuple]] = []
        self.rect = {"x": 1, "y": 2, "width": 30, "height": 40}
        self.size = {"width": 30, "height": 40}
        self.location = {"x": 1, "y": 2}

    def click(self) -> None:
        self.calls.append(("click", ()))

    def clear(self) -> None:
        self.calls.append(("clear", ()))

    def send_keys(self, *keys: str) -> None:
        self.calls.append(("send_keys", keys))

    def get_attribute(self, name: str) -> str | None:
        return self.attrs.get(name)

    def is_displayed(self) -> bool:
        return True

    def is_enabled(self) -> bool:
        return True


class FakeDriver:
    """Minimal WebDriver double: elements are keyed by (by, value)."""

    def __init__(self, *, fail_quit: bool = False) -> None:
        self.elements: dict[tuple[str, str], FakeElement] = {}
        self.current_url = "tauri://localhost/"
        self.title = "Test App"
        self.page_source = "<html></html>"
        self.capabilities = {"browserName": "wry"}
        self.scripts: list[tuple[str, tuple]] = []
        self.script_result: Any = None
        self.quit_calls = 0
        self.fail_quit = fail_quit
        self.visited: list[str] = []
        self.timeouts_set: dict[str, float] = {}
        self.commands: list[tuple[str, dict]] = []

    def find_element(self, by: str, value: str) -> FakeElement:
        try:
            return self.elements[(by, value)]
        except KeyError:
            raise NoSuchElementException(f"no such element: {by}={value}") from None

    def find_elements(self, by: str, value: str) -> list[FakeElement]:
        el = self.elements.get((by, value))
        return [el] if el else []

    def execute(self, command: str, params: dict | None = None) -> dict:
        # ActionChains.perform() lands here as a W3C actions command.
        self.commands.append((command, params or {}))
        return {"value": None}

    def get(self, url: str) -> None:
        self.visited.append(url)
        self.current_url = url

    def execute_script(self, script: str, *args: Any) -> Any:
        self.scripts.append((script, args))
        return self.script_result

    def get_screenshot_as_base64(self) -> str:
        return "aGVsbG8="  # b"hello"

    def set_script_timeout(self, seconds: float) -> None:
        self.timeouts_set["script"] = seconds

    def set_page_load_timeout(self, seconds: float) -> None:
        self.timeouts_set["pageLoad"] = seconds

    def implicitly_wait(self, seconds: float) -> None:
        self.timeouts_set["implicit"] = seconds

    def quit(self) -> None:
        self.quit_calls += 1
        if self.fail_quit:
            raise WebDriverException("invalid session id")


@pytest.fixture
def tauri_config(tmp_path: Path) -> TauriConfig:
    return TauriConfig(
        driver_path=str(tmp_path / "tauri-driver"),
        port=45444,
        ready_timeout=2.0,
        grace_period=0.3,
        wait_timeout_ms=50,
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def drivers() -> list[FakeDriver]:
    """Every FakeDriver handed out by the context's driver factory, in order."""
    return []


@pytest.fixture
def ctx(monkeypatch: pytest.MonkeyPatch, tauri_config: TauriConfig, drivers: list[FakeDriver]) -> ServerContext:
    """Context whose launcher never spawns and whose factory returns FakeDrivers."""

    def factory(server_url: str, application: str, config: TauriConfig) -> FakeDriver:
        driver = FakeDriver()
        drivers.append(driver)
        return driver

    monkeypatch.setattr(
        DriverLauncher,
        "ensure_started",
        lambda self, port=None: LaunchResult([], False, "tauri-driver already running", int(port or self.config.port)),
    )
    return ServerContext.create(tauri_config, driver_factory=factory)
