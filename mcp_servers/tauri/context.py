"""Process-wide server state, passed explicitly to every tool handler."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from selenium import webdriver
from selenium.webdriver.common.options import ArgOptions

from .config import TauriConfig
from .executor import CommandExecutor
from .launcher import DriverLauncher
from .sessions import SessionRegistry

DriverFactory = Callable[[str, str, TauriConfig], Any]


def tauri_options(application: str, config: TauriConfig) -> ArgOptions:
    options = ArgOptions()
    options.set_capability("browserName", config.browser_name)
    options.set_capability("tauri:options", {"application": application})
    return options


def remote_driver_factory(server_url: str, application: str, config: TauriConfig) -> Any:
    """Open a WebDriver session on tauri-driver for the given application binary."""
    return webdriver.Remote(command_executor=server_url, options=tauri_options(application, config))


@dataclass
class ServerContext:
    config: TauriConfig
    launcher: DriverLauncher
    sessions: SessionRegistry
    executor: CommandExecutor
    driver_factory: DriverFactory = field(default=remote_driver_factory)

    @classmethod
    def create(cls, config: TauriConfig | None = None, *, driver_factory: DriverFactory | None = None) -> ServerContext:
        config = config or TauriConfig.from_env()
        sessions = SessionRegistry()
        return cls(
            config=config,
            launcher=DriverLauncher(config),
            sessions=sessions,
            executor=CommandExecutor(sessions, default_timeout_ms=config.wait_timeout_ms),
            driver_factory=driver_factory or remote_driver_factory,
        )

    def status_text(self) -> str:
        current = self.sessions.current_id
        return f"Active Tauri session: {current}" if current else "No active Tauri session"
