"""Gateway: owns every piece of process-wide state and wires the components together.

Invariants:
    - One Gateway per application; nothing here is a module-level global
    - open_session() admits the connection before a session exists
    - close_session() is synchronous and idempotent: registry removal, limiter
      purge and channel close happen in one step
    - sweep() never drops the lifetime count of a session that is still open
    - notify() on a closed or unknown session is a benign no-op returning False

Design Decisions:
    - Constructor injection of settings, clock and registry so tests build
      isolated gateways with a ManualClock
    - The rate-limit sweeper is created here but started by the app lifespan
"""

import logging
from typing import Any, Callable
from uuid import uuid4

from toolbox_gateway.config import Settings
from toolbox_gateway.core.clock import Clock, MonotonicClock
from toolbox_gateway.core.domain_types import ClientAddress
from toolbox_gateway.core.rate_limit import (
    AdmissionController,
    ConnectionRateLimiter,
    SessionRateLimiter,
)
from toolbox_gateway.core.session_registry import Session, SessionRegistry
from toolbox_gateway.core.validation import ValidationEngine
from toolbox_gateway.infrastructure.session_channel import SessionChannel
from toolbox_gateway.infrastructure.sweeper import PeriodicSweeper
from toolbox_gateway.schemas.messages import JsonRpcRequest
from toolbox_gateway.services.mcp_protocol import ProtocolRouter
from toolbox_gateway.services.tool_dispatch import InvocationDispatcher
from toolbox_gateway.services.tools_registry import ToolRegistry, build_default_registry

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    return uuid4().hex


class Gateway:
    def __init__(
        self,
        settings: Settings,
        clock: Clock | None = None,
        registry: ToolRegistry | None = None,
        id_factory: Callable[[], str] = new_session_id,
    ):
        self.settings = settings
        self.clock = clock or MonotonicClock()
        self.registry = registry or build_default_registry()
        self._id_factory = id_factory

        self.sessions = SessionRegistry(self.clock)
        self.admission = AdmissionController(
            ConnectionRateLimiter(
                self.clock,
                window_seconds=settings.connection_window_seconds,
                max_connections=settings.connection_max_per_window,
            ),
            SessionRateLimiter(
                self.clock,
                max_per_window=settings.invocation_max_per_window,
                max_per_session=settings.invocation_max_per_session,
                window_seconds=settings.invocation_window_seconds,
                stale_after_seconds=settings.rate_limit_stale_after_seconds,
            ),
        )
        self.validator = ValidationEngine(self.registry, settings.max_payload_bytes)
        self.dispatcher = InvocationDispatcher(self.registry, self.admission, self.validator)
        self.protocol = ProtocolRouter(
            self.registry, self.dispatcher,
            server_name=settings.service_name,
            server_version=settings.service_version,
        )
        self.sweeper = PeriodicSweeper(
            self.sweep,
            settings.rate_limit_sweep_interval_seconds,
            name="rate_limit_sweep",
        )

    # -- Session lifecycle -----------------------------------------------------

    def open_session(self, client_address: ClientAddress) -> Session:
        """Admit and register a new streaming session.

        Raises TooManyConnectionsError when the address is over its window,
        DuplicateSessionError if the id factory repeats an id.
        """
        admitted = self.admission.admit_connection(client_address)
        if not admitted.ok:
            logger.warning(
                "Connection rate limit hit for %s", client_address,
                extra={
                    "event": "rate_limit_hit",
                    "client_address": client_address,
                    "retry_after": admitted.error.data.get("retry_after"),
                },
            )
            raise admitted.error

        session = self.sessions.create(self._id_factory(), SessionChannel())
        logger.info(
            "Session %s created", session.id,
            extra={
                "event": "session_created",
                "session_id": session.id,
                "client_address": client_address,
                "total_sessions": self.sessions.size(),
            },
        )
        return session

    def resolve(self, session_id: str) -> Session | None:
        return self.sessions.get(session_id)

    def close_session(self, session_id: str) -> None:
        session = self.sessions.remove(session_id)
        self.admission.release_session(session_id)
        if session is None:
            return
        session.channel.close()
        duration_ms = int((self.clock.now() - session.created_at) * 1000)
        logger.info(
            "Session %s closed", session_id,
            extra={
                "event": "session_closed",
                "session_id": session_id,
                "duration_ms": duration_ms,
                "total_sessions": self.sessions.size(),
            },
        )

    def close_all(self) -> int:
        """Shutdown: tell every open stream to end and tear its session down."""
        closed = 0
        for session in self.sessions:
            self.notify(session.id, "shutdown", {"reason": "server shutting down"})
            self.close_session(session.id)
            closed += 1
        return closed

    def sweep(self) -> int:
        """Evict stale limiter state for sessions no longer registered."""
        return self.admission.sweep(is_live=self.sessions.__contains__)

    def notify(self, session_id: str, event: str, data: Any) -> bool:
        session = self.sessions.get(session_id)
        if session is None:
            return False
        return session.channel.send({"event": event, "data": data})

    # -- Invocations -----------------------------------------------------------

    async def handle_message(
        self, session: Session, request: JsonRpcRequest,
    ) -> dict[str, Any] | None:
        return await self.protocol.handle(session.id, request)
