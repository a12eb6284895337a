"""Domain errors raised inside the bridge.

They never reach the MCP caller as raw exceptions: the command executor and
`McpServer.handle_call_tool` turn them into error results.
"""

from __future__ import annotations


class TauriBridgeError(Exception):
    """Base class for expected, structured bridge failures."""


class UnsupportedLocatorError(TauriBridgeError, ValueError):
    def __init__(self, strategy: str) -> None:
        super().__init__(f"Unsupported locator strategy: {strategy}")
        self.strategy = strategy


class NoActiveSessionError(TauriBridgeError):
    def __init__(self) -> None:
        super().__init__("No active session (call start_tauri_app first)")


class DriverLaunchError(TauriBridgeError):
    def __init__(self, message: str, *, command: list[str] | None = None, log_tail: str | None = None) -> None:
        super().__init__(message)
        self.command = command or []
        self.log_tail = log_tail


class SessionCloseError(TauriBridgeError):
    def __init__(self, session_id: str, reason: str) -> None:
        super().__init__(f"Session {session_id} removed, but remote quit failed: {reason}")
        self.session_id = session_id
        self.reason = reason


class InvalidArgumentError(TauriBridgeError, ValueError):
    pass
