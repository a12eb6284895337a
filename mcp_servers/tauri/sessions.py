"""
Session registry.

Tracks every WebDriver session created by this server and the single
"current" pointer that session-scoped tools implicitly target. Sessions that
lose the current pointer stay tracked so shutdown can still quit them.
"""

from __future__ import annotations

import enum
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any

from .errors import NoActiveSessionError, SessionCloseError

logger = logging.getLogger("mcp.tauri.sessions")


class TeardownIssueKind(str, enum.Enum):
    """Non-fatal failures that best-effort teardown tolerates."""

    SESSION_QUIT_FAILED = "session_quit_failed"
    DRIVER_TERMINATE_FAILED = "driver_terminate_failed"
    DRIVER_FORCE_KILLED = "driver_force_killed"


@dataclass(frozen=True, slots=True)
class TeardownIssue:
    kind: TeardownIssueKind
    target: str
    message: str


@dataclass
class Session:
    id: str
    driver: Any
    created_at: float = field(default_factory=time.time)


class SessionRegistry:
    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._current: str | None = None
        self._last_ms = 0
        self._lock = threading.RLock()

    def _next_id(self) -> str:
        # Millisecond timestamps, bumped so ids stay unique within one process.
        now_ms = int(time.time() * 1000)
        if now_ms <= self._last_ms:
            now_ms = self._last_ms + 1
        self._last_ms = now_ms
        return f"tauri_{now_ms}"

    def create(self, driver: Any) -> Session:
        with self._lock:
            session = Session(id=self._next_id(), driver=driver)
            if self._current is not None:
                logger.warning("session_displaced previous=%s current=%s", self._current, session.id)
            self._sessions[session.id] = session
            self._current = session.id
            logger.info("session_created id=%s tracked=%s", session.id, len(self._sessions))
            return session

    @property
    def current_id(self) -> str | None:
        return self._current

    def current(self) -> Session:
        with self._lock:
            session = self._sessions.get(self._current) if self._current else None
            if session is None:
                raise NoActiveSessionError()
            return session

    def get(self, session_id: str) -> Session | None:
        with self._lock:
            return self._sessions.get(session_id)

    def ids(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def close(self) -> str:
        """Quit and forget the current session; returns its id.

        Bookkeeping is updated before a failed remote quit is reported, so a
        dead driver connection can never wedge the registry.
        """
        with self._lock:
            session = self.current()
            self._sessions.pop(session.id, None)
            self._current = None
        try:
            session.driver.quit()
        except Exception as exc:  # noqa: BLE001
            logger.warning("session_quit_failed id=%s err=%s", session.id, exc)
            raise SessionCloseError(session.id, str(exc)) from exc
        logger.info("session_closed id=%s", session.id)
        return session.id

    def close_all(self) -> list[TeardownIssue]:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
            self._current = None
        issues: list[TeardownIssue] = []
        for session in sessions:
            try:
                session.driver.quit()
            except Exception as exc:  # noqa: BLE001
                logger.error("session_quit_failed id=%s err=%s", session.id, exc)
                issues.append(TeardownIssue(TeardownIssueKind.SESSION_QUIT_FAILED, session.id, str(exc)))
        return issues

    def __len__(self) -> int:
        return len(self._sessions)
