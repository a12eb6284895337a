from __future__ import annotations

import pytest

from mcp_servers.tauri.errors import NoActiveSessionError, SessionCloseError
from mcp_servers.tauri.sessions import SessionRegistry, TeardownIssueKind

from conftest import FakeDriver


def test_current_without_session_raises() -> None:
    registry = SessionRegistry()
    assert registry.current_id is None
    with pytest.raises(NoActiveSessionError):
        registry.current()


def test_create_sets_current() -> None:
    registry = SessionRegistry()
    driver = FakeDriver()
    session = registry.create(driver)
    assert session.id.startswith("tauri_")
    assert registry.current_id == session.id
    assert registry.current().driver is driver
    assert registry.get(session.id) is session


def test_ids_are_unique_even_within_one_millisecond() -> None:
    registry = SessionRegistry()
    ids = [registry.create(FakeDriver()).id for _ in range(20)]
    assert len(set(ids)) == 20


def test_second_create_displaces_but_keeps_tracking() -> None:
    registry = SessionRegistry()
    first = registry.create(FakeDriver())
    second = registry.create(FakeDriver())
    assert registry.current_id == second.id
    assert set(registry.ids()) == {first.id, second.id}
    assert len(registry) == 2


def test_close_quits_and_forgets() -> None:
    registry = SessionRegistry()
    driver = FakeDriver()
    session = registry.create(driver)
    assert registry.close() == session.id
    assert driver.quit_calls == 1
    assert registry.current_id is None
    assert len(registry) == 0


def test_close_without_session_raises() -> None:
    with pytest.raises(NoActiveSessionError):
        SessionRegistry().close()


def test_failed_quit_still_removes_entry() -> None:
    registry = SessionRegistry()
    session = registry.create(FakeDriver(fail_quit=True))
    with pytest.raises(SessionCloseError) as exc:
        registry.close()
    assert exc.value.session_id == session.id
    assert "invalid session id" in str(exc.value)
    assert registry.current_id is None
    assert registry.get(session.id) is None


def test_close_all_quits_everything_and_collects_failures() -> None:
    registry = SessionRegistry()
    ok = FakeDriver()
    broken = FakeDriver(fail_quit=True)
    registry.create(ok)
    bad = registry.create(broken)
    issues = registry.close_all()
    assert ok.quit_calls == 1
    assert broken.quit_calls == 1
    assert len(registry) == 0
    assert registry.current_id is None
    assert [(i.kind, i.target) for i in issues] == [(TeardownIssueKind.SESSION_QUIT_FAILED, bad.id)]
