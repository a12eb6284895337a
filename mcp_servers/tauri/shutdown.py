"""
Shutdown coordinator.

Every way the server can end (SIGINT/SIGTERM, an uncaught exception in the
main thread or a worker thread, stdin reaching EOF, interpreter exit) calls
`trigger()`. The first call flips ARMED -> SHUTTING_DOWN and runs teardown;
later calls return None without doing anything.

Teardown is best-effort: every session is asked to quit, the registry is
cleared, tauri-driver is terminated, and the process exits with status 0.
Failures along the way are collected into a TeardownReport instead of being
raised.
"""

from __future__ import annotations

import atexit
import enum
import logging
import os
import signal
import sys
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .sessions import TeardownIssue, TeardownIssueKind

if TYPE_CHECKING:
    from .launcher import DriverLauncher
    from .sessions import SessionRegistry

logger = logging.getLogger("mcp.tauri.shutdown")

ExitFunc = Callable[[int], Any]


class ShutdownState(str, enum.Enum):
    ARMED = "armed"
    SHUTTING_DOWN = "shutting_down"


@dataclass
class TeardownReport:
    reason: str
    issues: list[TeardownIssue] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.issues


def _exit_process(code: int) -> None:
    # Flush before os._exit: it skips interpreter cleanup, and we may be on a worker thread.
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except Exception:  # noqa: BLE001
            pass
    logging.shutdown()
    os._exit(code)


def _shutdown_signals() -> list[signal.Signals]:
    sigs = [signal.SIGINT, signal.SIGTERM]
    if hasattr(signal, "SIGHUP"):
        sigs.append(signal.SIGHUP)
    return sigs


class ShutdownCoordinator:
    def __init__(
        self,
        sessions: SessionRegistry,
        launcher: DriverLauncher,
        *,
        exit_func: ExitFunc | None = None,
    ) -> None:
        self.sessions = sessions
        self.launcher = launcher
        self._exit = exit_func or _exit_process
        self._state = ShutdownState.ARMED
        # Reentrant: a signal can land while the main thread is inside trigger().
        self._gate = threading.RLock()
        self._previous: dict[str, Any] = {}
        self.report: TeardownReport | None = None

    @property
    def state(self) -> ShutdownState:
        return self._state

    def trigger(self, reason: str, *, exit_process: bool = True) -> TeardownReport | None:
        with self._gate:
            if self._state is ShutdownState.SHUTTING_DOWN:
                logger.debug("shutdown_ignored reason=%s", reason)
                return None
            self._state = ShutdownState.SHUTTING_DOWN

        logger.info("shutdown_begin reason=%s", reason)
        report = TeardownReport(reason=reason)
        try:
            report.issues.extend(self.sessions.close_all())
        except Exception as exc:  # noqa: BLE001
            logger.error("shutdown_sessions_failed err=%s", exc)
            report.issues.append(TeardownIssue(TeardownIssueKind.SESSION_QUIT_FAILED, "*", str(exc)))

        try:
            stopped = self.launcher.terminate()
            if stopped.error:
                report.issues.append(
                    TeardownIssue(TeardownIssueKind.DRIVER_TERMINATE_FAILED, str(stopped.pid), stopped.error)
                )
            elif stopped.forced:
                report.issues.append(
                    TeardownIssue(TeardownIssueKind.DRIVER_FORCE_KILLED, str(stopped.pid), "no exit after SIGTERM")
                )
        except Exception as exc:  # noqa: BLE001
            logger.error("shutdown_driver_failed err=%s", exc)
            report.issues.append(TeardownIssue(TeardownIssueKind.DRIVER_TERMINATE_FAILED, "driver", str(exc)))

        self.report = report
        logger.info("shutdown_done reason=%s issues=%s", reason, len(report.issues))
        if exit_process:
            self._exit(0)
        return report

    # --- hooks -----------------------------------------------------------

    def _on_signal(self, signum: int, frame: Any) -> None:  # noqa: ARG002
        self.trigger(f"signal:{signal.Signals(signum).name}")

    def _on_uncaught(self, exc_type: type[BaseException], exc: BaseException, tb: Any) -> None:
        logger.critical("uncaught_exception", exc_info=(exc_type, exc, tb))
        self.trigger("uncaught_exception")

    def _on_thread_exception(self, args: threading.ExceptHookArgs) -> None:
        if args.exc_type is SystemExit:
            return
        logger.critical(
            "thread_exception thread=%s",
            getattr(args.thread, "name", "?"),
            exc_info=(args.exc_type, args.exc_value, args.exc_traceback),  # type: ignore[arg-type]
        )
        self.trigger("thread_exception")

    def _on_atexit(self) -> None:
        self.trigger("interpreter_exit", exit_process=False)

    def install(self) -> None:
        """Route process-level termination paths into trigger(). Main thread only."""
        self._previous["signals"] = {sig: signal.signal(sig, self._on_signal) for sig in _shutdown_signals()}
        self._previous["excepthook"] = sys.excepthook
        self._previous["threading_excepthook"] = threading.excepthook
        sys.excepthook = self._on_uncaught
        threading.excepthook = self._on_thread_exception
        atexit.register(self._on_atexit)

    def uninstall(self) -> None:
        for sig, handler in (self._previous.pop("signals", None) or {}).items():
            signal.signal(sig, handler)
        if "excepthook" in self._previous:
            sys.excepthook = self._previous.pop("excepthook")
        if "threading_excepthook" in self._previous:
            threading.excepthook = self._previous.pop("threading_excepthook")
        atexit.unregister(self._on_atexit)


__all__ = ["ShutdownCoordinator", "ShutdownState", "TeardownIssue", "TeardownIssueKind", "TeardownReport"]
