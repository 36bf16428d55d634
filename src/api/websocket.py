"""WebSocket endpoint for board change notifications."""

import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from src.exceptions import UnauthorizedError
from src.services.auth import verify_token
from src.services.realtime import ConnectionRegistry

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])

# Close code for a failed handshake authentication
WS_CLOSE_UNAUTHORIZED = 4001


@router.websocket("/ws")
async def websocket_board_changes(
    websocket: WebSocket,
    token: str | None = Query(default=None),
) -> None:
    """Push ``board_changed`` events to the client.

    Authentication via token query parameter (WebSocket doesn't support headers).
    The server never expects messages from the client; incoming frames are
    read only to notice when the client goes away.
    """
    try:
        user = verify_token(token)
    except UnauthorizedError:
        await websocket.close(code=WS_CLOSE_UNAUTHORIZED, reason="Invalid token")
        return

    registry: ConnectionRegistry = websocket.app.state.connections

    # Registered before the handshake finishes; broadcasts skip it until then
    await registry.add(websocket)
    try:
        await websocket.accept()
        logger.info(f"WebSocket connected: user={user.id}, open={len(registry)}")

        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

        logger.info(f"WebSocket disconnected: user={user.id}")
    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: user={user.id}")
    except Exception as e:
        logger.error(f"WebSocket error: {e}", exc_info=True)
    finally:
        await registry.remove(websocket)
