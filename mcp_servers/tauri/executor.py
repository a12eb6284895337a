"""
Command executor.

Single boundary where every fault raised while talking to the WebDriver
session is turned into an error ToolResult. Handlers pass an action that
receives the current session's driver; whatever it raises (no session,
unsupported locator, Selenium timeouts, dropped connections) comes back as
`Error <label>: <message>`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from .config import DEFAULT_WAIT_TIMEOUT_MS
from .errors import TauriBridgeError
from .locators import LocatorSpec, resolve_locator
from .server.types import ToolResult

if TYPE_CHECKING:
    from .sessions import SessionRegistry

logger = logging.getLogger("mcp.tauri.executor")

Action = Callable[[Any], ToolResult]


def timeout_seconds(args: dict[str, Any], default_ms: int = DEFAULT_WAIT_TIMEOUT_MS, key: str = "timeout") -> float:
    raw = args.get(key)
    try:
        ms = float(raw) if raw is not None else float(default_ms)
    except (TypeError, ValueError):
        ms = float(default_ms)
    return max(0.0, ms) / 1000.0


def format_result(value: Any) -> str:
    """JSON-ish rendering of a script return value."""
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        return str(value)


def error_message(exc: BaseException) -> str:
    if isinstance(exc, WebDriverException):
        # Selenium's str() appends stacktrace noise; msg is the useful part.
        msg = (exc.msg or "").strip()
        if msg:
            return msg
        if isinstance(exc, TimeoutException):
            return "Timed out waiting for condition"
        return type(exc).__name__
    return str(exc) or type(exc).__name__


class CommandExecutor:
    def __init__(self, sessions: SessionRegistry, *, default_timeout_ms: int = DEFAULT_WAIT_TIMEOUT_MS) -> None:
        self.sessions = sessions
        self.default_timeout_ms = default_timeout_ms

    def timeout(self, args: dict[str, Any]) -> float:
        return timeout_seconds(args, self.default_timeout_ms)

    def run(self, label: str, action: Action) -> ToolResult:
        """Run `action(driver)` against the current session; never raises."""
        try:
            driver = self.sessions.current().driver
            return action(driver)
        except TauriBridgeError as exc:
            return ToolResult.error(f"Error {label}: {exc}")
        except WebDriverException as exc:
            logger.info("webdriver_error op=%s type=%s msg=%s", label, type(exc).__name__, error_message(exc))
            return ToolResult.error(f"Error {label}: {error_message(exc)}")
        except Exception as exc:  # noqa: BLE001
            logger.exception("command_failed op=%s", label)
            return ToolResult.error(f"Error {label}: {error_message(exc)}")

    @staticmethod
    def wait_until(driver: Any, condition: Callable[[Any], Any], timeout: float) -> Any:
        return WebDriverWait(driver, timeout).until(condition)

    def find(self, driver: Any, by: str, value: str, timeout: float) -> Any:
        """Explicit wait for element presence, using Selenium's own polling."""
        locator = resolve_locator(by, value)
        return self.wait_until(driver, EC.presence_of_element_located(locator), timeout)

    def find_from_args(self, driver: Any, args: dict[str, Any]) -> Any:
        spec = LocatorSpec.from_args(args)
        return self.find(driver, spec.by, spec.value, self.timeout(args))
