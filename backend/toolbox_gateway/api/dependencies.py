"""Request Dependencies: FastAPI providers for app-scoped state.

Invariants:
    - The Gateway lives on app.state, set once by create_app()
    - Session lookup failure is HTTP 404, outside the tool error taxonomy
"""

from fastapi import HTTPException, Request, status

from toolbox_gateway.core.session_registry import Session
from toolbox_gateway.services.gateway import Gateway

SESSION_NOT_FOUND = {
    "error": {"code": "SESSION_NOT_FOUND", "message": "Session not found"},
}


def get_gateway(request: Request) -> Gateway:
    return request.app.state.gateway


def get_session_or_404(session_id: str, gateway: Gateway) -> Session:
    """Resolve a session id or raise 404. Never awaits between lookup and return."""
    session = gateway.resolve(session_id)
    if session is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=SESSION_NOT_FOUND)
    return session
