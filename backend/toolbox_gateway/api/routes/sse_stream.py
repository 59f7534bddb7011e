"""SSE Stream: GET /sse opens a session and keeps its event stream alive.

Invariants:
    - Connection admission runs before any session exists (429 + Retry-After on reject)
    - A duplicate session id is a 500, never an overwrite of the live session
    - Session teardown is guaranteed: the stream generator's finally block plus a
      background task, both idempotent
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from toolbox_gateway.api.dependencies import get_gateway
from toolbox_gateway.core.domain_types import ClientAddress
from toolbox_gateway.core.session_registry import DuplicateSessionError
from toolbox_gateway.services.gateway import Gateway
from toolbox_gateway.services.sse_transport import SSE_HEADERS, stream_session

logger = logging.getLogger(__name__)
router = APIRouter(tags=["transport"])


def client_address(request: Request) -> ClientAddress:
    return ClientAddress(request.client.host if request.client else "unknown")


@router.get("/sse")
async def open_stream(request: Request, gateway: Gateway = Depends(get_gateway)):
    """Open a streaming session. TooManyConnectionsError propagates to the 429 handler."""
    try:
        session = gateway.open_session(client_address(request))
    except DuplicateSessionError as exc:
        logger.error(f"SSE connection failed: {exc}", extra={"session_id": exc.session_id})
        raise HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR, detail="SSE connection failed",
        )

    async def teardown() -> None:
        gateway.close_session(session.id)

    return StreamingResponse(
        stream_session(gateway, session),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
        background=BackgroundTask(teardown),
    )
