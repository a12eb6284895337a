from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_PORT = 4444
DEFAULT_WAIT_TIMEOUT_MS = 10_000


def expand_path(raw: str) -> str:
    return str(Path(raw).expanduser())


def _default_driver_path() -> str:
    # cargo install tauri-driver puts the binary here
    return str(Path.home() / ".cargo" / "bin" / "tauri-driver")


def _default_log_dir() -> str:
    # mcp_servers/tauri/config.py -> repo root is parents[2]
    return str(Path(__file__).resolve().parents[2] / "data" / "logs")


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


@dataclass
class TauriConfig:
    driver_path: str
    port: int = DEFAULT_PORT
    host: str = "127.0.0.1"
    ready_timeout: float = 4.0
    grace_period: float = 2.0
    wait_timeout_ms: int = DEFAULT_WAIT_TIMEOUT_MS
    log_dir: str = ""
    browser_name: str = "wry"

    def __post_init__(self) -> None:
        if not self.log_dir:
            self.log_dir = _default_log_dir()

    @classmethod
    def from_env(cls) -> TauriConfig:
        driver = os.environ.get("MCP_TAURI_DRIVER")
        return cls(
            driver_path=expand_path(driver) if driver else _default_driver_path(),
            port=int(os.environ.get("MCP_TAURI_PORT", str(DEFAULT_PORT))),
            host=os.environ.get("MCP_TAURI_HOST", "127.0.0.1").strip() or "127.0.0.1",
            ready_timeout=max(0.1, _env_float("MCP_TAURI_READY_TIMEOUT", 4.0)),
            grace_period=max(0.0, _env_float("MCP_TAURI_GRACE_PERIOD", 2.0)),
            wait_timeout_ms=int(os.environ.get("MCP_TAURI_WAIT_TIMEOUT_MS", str(DEFAULT_WAIT_TIMEOUT_MS))),
            log_dir=expand_path(os.environ.get("MCP_TAURI_LOG_DIR", "")) if os.environ.get("MCP_TAURI_LOG_DIR") else "",
            browser_name=os.environ.get("MCP_TAURI_BROWSER_NAME", "wry"),
        )

    def server_url(self, port: int | None = None) -> str:
        return f"http://{self.host}:{port or self.port}"
