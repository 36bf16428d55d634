"""Real-time board invalidation over WebSockets.

Every successful card mutation sends ``{"type": "board_changed"}`` to each
open WebSocket. Clients react by re-fetching the board. With the ``redis``
backend the event is published to a Redis channel and each process relays it
to its own connections, so several workers can serve the same board.
"""

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from enum import StrEnum
from typing import TYPE_CHECKING

import anyio.from_thread
import redis
import redis.asyncio as aioredis
from fastapi import WebSocket
from starlette.websockets import WebSocketState

from src.config import Settings

if TYPE_CHECKING:
    from redis.asyncio.client import PubSub

logger = logging.getLogger(__name__)


class BoardEventType(StrEnum):
    """Event types pushed to realtime clients."""

    BOARD_CHANGED = "board_changed"


BOARD_CHANGED_MESSAGE = {"type": BoardEventType.BOARD_CHANGED.value}


def is_open(websocket: WebSocket) -> bool:
    """Check that the handshake completed and neither side has closed."""
    return (
        websocket.application_state == WebSocketState.CONNECTED
        and websocket.client_state == WebSocketState.CONNECTED
    )


class ConnectionRegistry:
    """Set of live WebSocket connections for this process.

    The lock guards membership only. Sends happen outside it and run
    concurrently, so one slow or broken socket does not hold up the rest.
    """

    def __init__(self) -> None:
        self._connections: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._connections)

    async def add(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._connections.add(websocket)

    async def remove(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._connections.discard(websocket)

    async def broadcast(self, message: dict) -> int:
        """Send a message to every open connection.

        Connections that are not open are skipped. A connection whose send
        fails is dropped from the registry.

        Returns:
            Number of connections the message was delivered to
        """
        async with self._lock:
            targets = [ws for ws in self._connections if is_open(ws)]

        if not targets:
            return 0

        results = await asyncio.gather(
            *(ws.send_json(message) for ws in targets),
            return_exceptions=True,
        )

        delivered = 0
        for websocket, result in zip(targets, results, strict=True):
            if isinstance(result, Exception):
                logger.warning(f"Dropping WebSocket after failed send: {result!r}")
                await self.remove(websocket)
            else:
                delivered += 1

        logger.debug(f"Broadcast {message.get('type')} to {delivered}/{len(targets)} connections")
        return delivered


class BoardNotifier:
    """Announces board changes after a mutation commits.

    Called from synchronous endpoints, which FastAPI runs in worker threads.
    """

    def __init__(self, registry: ConnectionRegistry, settings: Settings) -> None:
        self.registry = registry
        self._use_redis = settings.uses_redis
        self._redis_url = settings.redis_url
        self._channel = settings.redis_channel
        self._sync_redis: redis.Redis | None = None

    def get_sync_redis(self) -> redis.Redis:
        """Get synchronous Redis client for publishing from API endpoints."""
        if self._sync_redis is None:
            self._sync_redis = redis.from_url(self._redis_url)
        return self._sync_redis

    def board_changed(self) -> None:
        """Tell every connected client that the board needs a refresh."""
        if self._use_redis:
            self._publish(BOARD_CHANGED_MESSAGE)
        else:
            anyio.from_thread.run(self.registry.broadcast, BOARD_CHANGED_MESSAGE)

    def _publish(self, message: dict) -> None:
        try:
            self.get_sync_redis().publish(self._channel, json.dumps(message))
            logger.debug(f"Published {message['type']} to {self._channel}")
        except Exception as e:
            # Don't fail the request if pub/sub fails
            logger.error(f"Failed to publish board event: {e}")

    def close(self) -> None:
        if self._sync_redis is not None:
            self._sync_redis.close()
            self._sync_redis = None


class RealtimeService:
    """Async Redis pub/sub subscriber feeding the local registry."""

    def __init__(self, redis_url: str) -> None:
        self._redis_url = redis_url
        self._redis: aioredis.Redis | None = None
        self._pubsub: PubSub | None = None

    async def _get_redis(self) -> aioredis.Redis:
        if self._redis is None:
            self._redis = aioredis.from_url(self._redis_url)
        return self._redis

    async def subscribe(self, channel: str) -> AsyncIterator[dict]:
        """Subscribe to a Redis channel and yield messages."""
        redis_conn = await self._get_redis()
        self._pubsub = redis_conn.pubsub()
        await self._pubsub.subscribe(channel)

        try:
            async for message in self._pubsub.listen():
                if message["type"] == "message":
                    try:
                        data = json.loads(message["data"])
                        yield data
                    except json.JSONDecodeError:
                        logger.warning(f"Invalid JSON in pub/sub message: {message['data']}")
        finally:
            if self._pubsub:
                await self._pubsub.unsubscribe(channel)

    async def relay(self, channel: str, registry: ConnectionRegistry) -> None:
        """Forward every message on the channel to the local connections."""
        async for message in self.subscribe(channel):
            if message.get("type") != BoardEventType.BOARD_CHANGED:
                logger.warning(f"Ignoring unknown realtime event: {message.get('type')}")
                continue
            await registry.broadcast(BOARD_CHANGED_MESSAGE)

    async def cleanup(self) -> None:
        """Clean up Redis connections."""
        if self._pubsub:
            await self._pubsub.close()
        if self._redis:
            await self._redis.close()
