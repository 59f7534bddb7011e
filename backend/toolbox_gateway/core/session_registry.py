"""Session Registry: in-memory map from session id to open-connection handle.

Invariants:
    - Exactly one live Session per id; a duplicate create is rejected, never overwritten
    - get() returning None is a normal outcome (stale or forged ids), not an error
    - remove() is idempotent
    - No capacity bound here; the connection limiter bounds growth

Design Decisions:
    - Explicitly owned object (constructed by the gateway, injected where needed)
      instead of a module-level dict, so tests get a fresh registry each time
    - Connection handle typed by Protocol: core never imports the asyncio channel
"""

from dataclasses import dataclass
from typing import Any, Iterator, Protocol

from toolbox_gateway.core.clock import Clock
from toolbox_gateway.core.domain_types import SessionId


class ConnectionHandle(Protocol):
    """Server-to-client push side of an open stream."""
    def send(self, event: dict[str, Any]) -> bool: ...
    def close(self) -> None: ...

    @property
    def closed(self) -> bool: ...


class DuplicateSessionError(RuntimeError):
    """Transport produced an id that is already registered."""

    def __init__(self, session_id: str):
        super().__init__(f"Session '{session_id}' is already registered")
        self.session_id = session_id


@dataclass(frozen=True)
class Session:
    id: SessionId
    created_at: float
    channel: ConnectionHandle


class SessionRegistry:
    """Process-lifetime registry of open streaming sessions."""

    def __init__(self, clock: Clock):
        self._clock = clock
        self._sessions: dict[str, Session] = {}

    def create(self, session_id: str, channel: ConnectionHandle) -> Session:
        if session_id in self._sessions:
            raise DuplicateSessionError(session_id)
        session = Session(
            id=SessionId(session_id), created_at=self._clock.now(), channel=channel,
        )
        self._sessions[session_id] = session
        return session

    def get(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> Session | None:
        return self._sessions.pop(session_id, None)

    def size(self) -> int:
        return len(self._sessions)

    def ids(self) -> list[str]:
        return list(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __iter__(self) -> Iterator[Session]:
        return iter(list(self._sessions.values()))
