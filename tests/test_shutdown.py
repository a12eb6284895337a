"""
Tests for the shutdown coordinator: single-shot teardown from any trigger.
"""

from __future__ import annotations

import os
import signal
import sys
import threading
import time

import pytest

from mcp_servers.tauri.launcher import TerminateResult
from mcp_servers.tauri.sessions import SessionRegistry, TeardownIssueKind
from mcp_servers.tauri.shutdown import ShutdownCoordinator, ShutdownState

from conftest import FakeDriver


class FakeLauncher:
    def __init__(self, result: TerminateResult | None = None, *, raises: Exception | None = None) -> None:
        self.result = result or TerminateResult(pid=None)
        self.raises = raises
        self.terminate_calls = 0

    def terminate(self) -> TerminateResult:
        self.terminate_calls += 1
        if self.raises is not None:
            raise self.raises
        return self.result


def _coordinator(
    sessions: SessionRegistry, launcher: FakeLauncher
) -> tuple[ShutdownCoordinator, list[int]]:
    exits: list[int] = []
    return ShutdownCoordinator(sessions, launcher, exit_func=exits.append), exits  # type: ignore[arg-type]


def test_trigger_tears_down_once_and_exits_zero() -> None:
    sessions = SessionRegistry()
    driver = FakeDriver()
    sessions.create(driver)
    launcher = FakeLauncher(TerminateResult(pid=123, graceful=True))
    coordinator, exits = _coordinator(sessions, launcher)

    report = coordinator.trigger("stdin_closed")
    assert report is not None and report.clean
    assert report.reason == "stdin_closed"
    assert coordinator.state is ShutdownState.SHUTTING_DOWN
    assert driver.quit_calls == 1
    assert len(sessions) == 0
    assert launcher.terminate_calls == 1
    assert exits == [0]

    assert coordinator.trigger("signal:SIGTERM") is None
    assert driver.quit_calls == 1
    assert launcher.terminate_calls == 1
    assert exits == [0]


def test_concurrent_triggers_run_teardown_once() -> None:
    sessions = SessionRegistry()
    drivers = [FakeDriver() for _ in range(3)]
    for d in drivers:
        sessions.create(d)
    launcher = FakeLauncher()
    coordinator, exits = _coordinator(sessions, launcher)

    barrier = threading.Barrier(8)

    def fire(i: int) -> None:
        barrier.wait()
        coordinator.trigger(f"thread-{i}")

    threads = [threading.Thread(target=fire, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert [d.quit_calls for d in drivers] == [1, 1, 1]
    assert launcher.terminate_calls == 1
    assert exits == [0]


def test_teardown_failures_are_reported_not_raised() -> None:
    sessions = SessionRegistry()
    bad = sessions.create(FakeDriver(fail_quit=True))
    launcher = FakeLauncher(TerminateResult(pid=77, forced=True))
    coordinator, exits = _coordinator(sessions, launcher)

    report = coordinator.trigger("stdin_closed")
    assert report is not None and not report.clean
    kinds = {(i.kind, i.target) for i in report.issues}
    assert kinds == {
        (TeardownIssueKind.SESSION_QUIT_FAILED, bad.id),
        (TeardownIssueKind.DRIVER_FORCE_KILLED, "77"),
    }
    assert coordinator.report is report
    assert exits == [0]


def test_driver_terminate_error_is_reported() -> None:
    coordinator, exits = _coordinator(SessionRegistry(), FakeLauncher(raises=OSError("no such process")))
    report = coordinator.trigger("stdin_closed")
    assert report is not None
    assert [i.kind for i in report.issues] == [TeardownIssueKind.DRIVER_TERMINATE_FAILED]
    assert "no such process" in report.issues[0].message
    assert exits == [0]


def test_atexit_hook_does_not_exit() -> None:
    coordinator, exits = _coordinator(SessionRegistry(), FakeLauncher())
    coordinator._on_atexit()
    assert coordinator.state is ShutdownState.SHUTTING_DOWN
    assert coordinator.report is not None and coordinator.report.reason == "interpreter_exit"
    assert exits == []


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
def test_installed_signal_handler_triggers_teardown() -> None:
    sessions = SessionRegistry()
    driver = FakeDriver()
    sessions.create(driver)
    coordinator, exits = _coordinator(sessions, FakeLauncher())
    coordinator.install()
    try:
        os.kill(os.getpid(), signal.SIGTERM)
        deadline = time.monotonic() + 2.0
        while coordinator.state is ShutdownState.ARMED and time.monotonic() < deadline:
            time.sleep(0.01)
        assert coordinator.report is not None
        assert coordinator.report.reason == "signal:SIGTERM"
        assert driver.quit_calls == 1
        # stdin closing afterwards is a no-op.
        assert coordinator.trigger("stdin_closed") is None
        assert exits == [0]
    finally:
        coordinator.uninstall()


def test_uncaught_main_thread_exception_triggers_teardown() -> None:
    sessions = SessionRegistry()
    driver = FakeDriver()
    sessions.create(driver)
    launcher = FakeLauncher()
    coordinator, exits = _coordinator(sessions, launcher)
    coordinator.install()
    try:
        exc = RuntimeError("main loop crashed")
        sys.excepthook(RuntimeError, exc, None)
        assert coordinator.report is not None
        assert coordinator.report.reason == "uncaught_exception"
        assert driver.quit_calls == 1
        assert len(sessions) == 0
        assert launcher.terminate_calls == 1
        assert exits == [0]
    finally:
        coordinator.uninstall()


def test_worker_thread_exception_triggers_teardown() -> None:
    coordinator, exits = _coordinator(SessionRegistry(), FakeLauncher())
    coordinator.install()
    try:

        def boom() -> None:
            raise RuntimeError("worker died")

        t = threading.Thread(target=boom)
        t.start()
        t.join(timeout=5)
        assert coordinator.report is not None
        assert coordinator.report.reason == "thread_exception"
        assert exits == [0]
    finally:
        coordinator.uninstall()


def test_uninstall_restores_hooks() -> None:
    before_sys = sys.excepthook
    before_thread = threading.excepthook
    before_term = signal.getsignal(signal.SIGTERM)
    coordinator, _ = _coordinator(SessionRegistry(), FakeLauncher())
    coordinator.install()
    assert sys.excepthook == coordinator._on_uncaught
    coordinator.uninstall()
    assert sys.excepthook is before_sys
    assert threading.excepthook is before_thread
    assert signal.getsignal(signal.SIGTERM) == before_term
