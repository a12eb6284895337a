from __future__ import annotations

import logging
import os
import signal
import socket
import subprocess
import threading
import time
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path

from .config import TauriConfig
from .errors import DriverLaunchError

logger = logging.getLogger("mcp.tauri.launcher")

# Process groups (and killpg) only exist on POSIX.
_HAS_PROCESS_GROUPS = hasattr(os, "killpg")


@dataclass
class DriverProcessHandle:
    """Ownership record for the spawned tauri-driver."""

    process: subprocess.Popen
    port: int
    pgid: int | None = None
    log_path: str | None = None

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def alive(self) -> bool:
        try:
            return self.process.poll() is None
        except Exception:
            return False


@dataclass
class LaunchResult:
    command: list[str]
    started: bool
    message: str
    port: int
    pid: int | None = None
    log_path: str | None = None


@dataclass
class TerminateResult:
    pid: int | None
    graceful: bool = False
    forced: bool = False
    error: str | None = None


def _tail_text(path: str | None, max_chars: int = 4000) -> str | None:
    if not path:
        return None
    try:
        p = Path(path)
        if not p.exists():
            return None
        raw = p.read_text(encoding="utf-8", errors="replace")
        return raw if len(raw) <= max_chars else raw[-max_chars:]
    except OSError:
        return None


class DriverLauncher:
    """Owns the single tauri-driver process of this server."""

    def __init__(self, config: TauriConfig | None = None) -> None:
        self.config = config or TauriConfig.from_env()
        self._handle: DriverProcessHandle | None = None
        self._lock = threading.RLock()
        self.spawn_count = 0

    @property
    def handle(self) -> DriverProcessHandle | None:
        return self._handle

    def is_running(self) -> bool:
        with self._lock:
            return self._handle is not None and self._handle.alive

    def build_launch_command(self, port: int) -> list[str]:
        return [self.config.driver_path, "--port", str(port)]

    def port_listening(self, port: int, timeout: float = 0.2) -> bool:
        """Return True if something accepts TCP connections on the driver port."""
        try:
            with socket.create_connection((self.config.host, int(port)), timeout=timeout):
                return True
        except OSError:
            return False

    def _open_log(self) -> tuple[object, str | None]:
        try:
            log_dir = Path(self.config.log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)
            log_path = str(log_dir / f"tauri_driver_{int(time.time() * 1000)}.log")
            return open(log_path, "ab", buffering=0), log_path  # noqa: SIM115
        except OSError as exc:
            logger.warning("driver_log_unavailable dir=%s err=%s", self.config.log_dir, exc)
            return subprocess.DEVNULL, None

    def _wait_ready(self, handle: DriverProcessHandle) -> str | None:
        """Poll the port until it accepts connections. Returns a failure reason or None."""
        deadline = time.monotonic() + max(0.1, float(self.config.ready_timeout))
        while time.monotonic() < deadline:
            code = handle.process.poll()
            if code is not None:
                return f"tauri-driver exited during startup with code {code}"
            if self.port_listening(handle.port):
                return None
            time.sleep(0.1)
        return f"tauri-driver did not listen on port {handle.port} within {self.config.ready_timeout:.1f}s"

    def ensure_started(self, port: int | None = None) -> LaunchResult:
        """Start tauri-driver unless this server already tracks a live one.

        Raises DriverLaunchError when the binary is missing, cannot be spawned,
        or never becomes reachable.
        """
        with self._lock:
            port = int(port or self.config.port)
            handle = self._handle
            if handle is not None:
                if handle.alive:
                    return LaunchResult([], False, "tauri-driver already running", handle.port, handle.pid, handle.log_path)
                logger.warning(
                    "driver_exited pid=%s code=%s, relaunching", handle.pid, handle.process.returncode
                )
                self._handle = None

            if self.port_listening(port):
                logger.info("driver_attach port=%s (not owned)", port)
                return LaunchResult([], False, f"tauri-driver already listening on port {port}", port)

            cmd = self.build_launch_command(port)
            binary = Path(self.config.driver_path)
            if not binary.is_file() or not os.access(str(binary), os.X_OK):
                raise DriverLaunchError(
                    f"tauri-driver not found or not executable at {binary} "
                    "(install it with `cargo install tauri-driver` or set MCP_TAURI_DRIVER)",
                    command=cmd,
                )

            log_fh, log_path = self._open_log()
            try:
                process = subprocess.Popen(
                    cmd,
                    stdin=subprocess.DEVNULL,
                    stdout=log_fh,
                    stderr=log_fh,
                    start_new_session=_HAS_PROCESS_GROUPS,
                )
            except OSError as exc:
                raise DriverLaunchError(str(exc), command=cmd, log_tail=_tail_text(log_path)) from exc
            finally:
                if log_fh is not subprocess.DEVNULL:
                    with suppress(OSError):
                        log_fh.close()  # type: ignore[attr-defined]

            self.spawn_count += 1
            # start_new_session makes the child its own group leader.
            handle = DriverProcessHandle(
                process=process,
                port=port,
                pgid=process.pid if _HAS_PROCESS_GROUPS else None,
                log_path=log_path,
            )
            self._handle = handle
            logger.info("driver_spawned pid=%s port=%s log=%s", handle.pid, port, log_path)

            reason = self._wait_ready(handle)
            if reason is not None:
                self.terminate()
                raise DriverLaunchError(reason, command=cmd, log_tail=_tail_text(log_path))
            return LaunchResult(cmd, True, f"tauri-driver started on port {port}", port, handle.pid, log_path)

    def _kill_group(self, handle: DriverProcessHandle) -> None:
        if handle.pgid is not None and _HAS_PROCESS_GROUPS:
            try:
                os.killpg(handle.pgid, signal.SIGKILL)
            except ProcessLookupError:
                pass
            return
        handle.process.kill()

    def terminate(self) -> TerminateResult:
        """Best-effort stop: SIGTERM, grace period, then SIGKILL the whole group.

        Never raises. The handle is cleared on every path.
        """
        with self._lock:
            handle = self._handle
            if handle is None:
                return TerminateResult(pid=None)
            result = TerminateResult(pid=handle.pid)
            try:
                proc = handle.process
                if proc.poll() is not None:
                    result.graceful = True
                else:
                    proc.terminate()
                    try:
                        proc.wait(timeout=max(0.0, float(self.config.grace_period)))
                        result.graceful = True
                    except subprocess.TimeoutExpired:
                        logger.warning("driver_kill pid=%s pgid=%s (no exit after SIGTERM)", handle.pid, handle.pgid)
                        self._kill_group(handle)
                        result.forced = True
                        with suppress(subprocess.TimeoutExpired):
                            proc.wait(timeout=1.0)
            except Exception as exc:  # noqa: BLE001
                result.error = str(exc)
                logger.error("driver_terminate_failed pid=%s err=%s", handle.pid, exc)
                if handle.alive:
                    try:
                        self._kill_group(handle)
                        result.forced = True
                        with suppress(subprocess.TimeoutExpired):
                            handle.process.wait(timeout=1.0)
                    except Exception as kill_exc:  # noqa: BLE001
                        logger.error("driver_kill_failed pid=%s err=%s", handle.pid, kill_exc)
            finally:
                self._handle = None
            logger.info(
                "driver_stopped pid=%s graceful=%s forced=%s", result.pid, result.graceful, result.forced
            )
            return result

    def status(self) -> dict[str, object]:
        with self._lock:
            handle = self._handle
            if handle is None:
                return {"running": False}
            return {
                "running": handle.alive,
                "pid": handle.pid,
                "pgid": handle.pgid,
                "port": handle.port,
                "log_path": handle.log_path,
            }
