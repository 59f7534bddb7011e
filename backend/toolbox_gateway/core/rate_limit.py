"""Admission Control: connection-open limiter per address, invocation limiter per session.

Invariants:
    - check() is one synchronous step: read, compare, increment; no await inside
    - Rejected requests are never counted
    - SessionLimit.total_count is non-decreasing and never exceeds max_per_session
    - A short window resets when now >= reset_at; the next request opens a fresh window
    - State is created lazily, removed on session close, and swept when stale;
      the sweep never evicts a session reported live

Design Decisions:
    - Checks return Result (Ok | Err) instead of raising: the dispatcher reads
      them as a plain sequence
    - sweep() is called by an external owner (PeriodicSweeper); constructors
      never start timers
"""

import math
from dataclasses import dataclass
from typing import Callable

from toolbox_gateway.core.clock import Clock
from toolbox_gateway.core.domain_types import RateLimitScope
from toolbox_gateway.core.errors import RateLimitExceededError, TooManyConnectionsError
from toolbox_gateway.core.result import Err, Ok, Result

DEFAULT_CONNECTION_WINDOW_SECONDS = 15 * 60
DEFAULT_MAX_CONNECTIONS = 10
DEFAULT_INVOCATION_WINDOW_SECONDS = 60
DEFAULT_MAX_PER_WINDOW = 30
DEFAULT_MAX_PER_SESSION = 100
DEFAULT_STALE_AFTER_SECONDS = 60 * 60


def _seconds_until(deadline: float, now: float) -> int:
    if now >= deadline:
        return 0
    return math.ceil(deadline - now)


@dataclass
class ConnectionWindow:
    count: int
    reset_at: float


@dataclass
class SessionLimit:
    count: int
    reset_at: float
    total_count: int


@dataclass(frozen=True)
class SessionStats:
    current_count: int
    total_count: int
    remaining: int
    reset_at: float | None


class ConnectionRateLimiter:
    """Fixed window of connection opens per client address."""

    def __init__(
        self,
        clock: Clock,
        window_seconds: float = DEFAULT_CONNECTION_WINDOW_SECONDS,
        max_connections: int = DEFAULT_MAX_CONNECTIONS,
    ):
        self._clock = clock
        self.window_seconds = window_seconds
        self.max_connections = max_connections
        self._windows: dict[str, ConnectionWindow] = {}

    def check(self, address: str) -> Result[int]:
        """Count a connection attempt. Ok carries the count within the window."""
        now = self._clock.now()
        window = self._windows.get(address)
        if window is None or now >= window.reset_at:
            window = ConnectionWindow(count=0, reset_at=now + self.window_seconds)
            self._windows[address] = window

        if window.count >= self.max_connections:
            return Err(TooManyConnectionsError(_seconds_until(window.reset_at, now)))

        window.count += 1
        return Ok(window.count)

    def sweep(self) -> int:
        now = self._clock.now()
        expired = [addr for addr, w in self._windows.items() if now >= w.reset_at]
        for addr in expired:
            del self._windows[addr]
        return len(expired)

    def __len__(self) -> int:
        return len(self._windows)


class SessionRateLimiter:
    """Short-window cap plus lifetime cap on tool invocations per session."""

    def __init__(
        self,
        clock: Clock,
        max_per_window: int = DEFAULT_MAX_PER_WINDOW,
        max_per_session: int = DEFAULT_MAX_PER_SESSION,
        window_seconds: float = DEFAULT_INVOCATION_WINDOW_SECONDS,
        stale_after_seconds: float = DEFAULT_STALE_AFTER_SECONDS,
    ):
        self._clock = clock
        self.max_per_window = max_per_window
        self.max_per_session = max_per_session
        self.window_seconds = window_seconds
        self.stale_after_seconds = stale_after_seconds
        self._sessions: dict[str, SessionLimit] = {}

    def check(self, session_id: str) -> Result[int]:
        """Admit or reject one invocation. Ok carries the new lifetime count."""
        now = self._clock.now()
        limit = self._sessions.get(session_id)
        if limit is None or now >= limit.reset_at:
            limit = SessionLimit(
                count=0,
                reset_at=now + self.window_seconds,
                total_count=limit.total_count if limit else 0,
            )
            self._sessions[session_id] = limit

        if limit.count >= self.max_per_window:
            return Err(RateLimitExceededError(
                _seconds_until(limit.reset_at, now), RateLimitScope.WINDOW,
            ))

        if limit.total_count >= self.max_per_session:
            return Err(RateLimitExceededError(None, RateLimitScope.SESSION))

        limit.count += 1
        limit.total_count += 1
        return Ok(limit.total_count)

    def get_retry_after(self, session_id: str) -> int:
        """Seconds until the short window resets; 0 if no state or already elapsed."""
        limit = self._sessions.get(session_id)
        if limit is None:
            return 0
        return _seconds_until(limit.reset_at, self._clock.now())

    def get_session_stats(self, session_id: str) -> SessionStats:
        limit = self._sessions.get(session_id)
        if limit is None:
            return SessionStats(
                current_count=0, total_count=0,
                remaining=self.max_per_window, reset_at=None,
            )
        expired = self._clock.now() >= limit.reset_at
        current = 0 if expired else limit.count
        return SessionStats(
            current_count=current,
            total_count=limit.total_count,
            remaining=self.max_per_window - current,
            reset_at=limit.reset_at,
        )

    def remove_session(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def has_state(self, session_id: str) -> bool:
        return session_id in self._sessions

    def sweep(self, is_live: Callable[[str], bool] | None = None) -> int:
        """Evict state untouched for stale_after_seconds past its last window reset.

        Ids for which is_live() is true are kept regardless of age: an open
        session keeps its lifetime count until it closes.
        """
        now = self._clock.now()
        stale = [
            sid for sid, limit in self._sessions.items()
            if now > limit.reset_at + self.stale_after_seconds
            and not (is_live and is_live(sid))
        ]
        for sid in stale:
            del self._sessions[sid]
        return len(stale)

    def __len__(self) -> int:
        return len(self._sessions)


class AdmissionController:
    """Both limiters behind one facade. Each must allow a request independently."""

    def __init__(
        self,
        connections: ConnectionRateLimiter,
        invocations: SessionRateLimiter,
    ):
        self.connections = connections
        self.invocations = invocations

    def admit_connection(self, address: str) -> Result[int]:
        return self.connections.check(address)

    def admit_invocation(self, session_id: str) -> Result[int]:
        return self.invocations.check(session_id)

    def get_retry_after(self, session_id: str) -> int:
        return self.invocations.get_retry_after(session_id)

    def release_session(self, session_id: str) -> None:
        self.invocations.remove_session(session_id)

    def sweep(self, is_live: Callable[[str], bool] | None = None) -> int:
        return self.invocations.sweep(is_live) + self.connections.sweep()
