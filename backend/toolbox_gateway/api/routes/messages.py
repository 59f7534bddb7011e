"""Messages: POST /messages?sessionId=... carries JSON-RPC requests for a session.

Invariants:
    - Unknown or closed session -> 404, nothing reaches the dispatcher
    - Session resolution and invocation admission happen with no await between them
    - Notifications get 202 with an empty body; everything else gets the JSON-RPC reply
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, Response

from toolbox_gateway.api.dependencies import get_gateway, get_session_or_404
from toolbox_gateway.schemas.messages import JsonRpcRequest
from toolbox_gateway.services.gateway import Gateway

logger = logging.getLogger(__name__)
router = APIRouter(tags=["transport"])


@router.post("/messages")
async def post_message(
    body: JsonRpcRequest,
    session_id: str = Query(..., alias="sessionId", min_length=1),
    gateway: Gateway = Depends(get_gateway),
):
    session = get_session_or_404(session_id, gateway)
    logger.debug("Message %s for session %s", body.method, session.id)
    reply = await gateway.handle_message(session, body)
    if reply is None:
        return Response(status_code=status.HTTP_202_ACCEPTED)
    return JSONResponse(content=reply)
