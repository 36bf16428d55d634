"""FastAPI application entry point."""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from src.api import auth, board, websocket
from src.config import get_settings
from src.services.realtime import BoardNotifier, ConnectionRegistry, RealtimeService

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def log_relay_exit(task: asyncio.Task) -> None:
    """Report a relay that stopped on its own; events no longer reach this process."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Redis relay stopped, board events are no longer delivered: {exc!r}")
    else:
        logger.warning("Redis relay ended, board events are no longer delivered")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the realtime registry and, with Redis, the cross-process relay."""
    registry = ConnectionRegistry()
    notifier = BoardNotifier(registry, settings)
    app.state.connections = registry
    app.state.notifier = notifier

    relay_service: RealtimeService | None = None
    relay_task: asyncio.Task | None = None
    if settings.uses_redis:
        relay_service = RealtimeService(settings.redis_url)
        relay_task = asyncio.create_task(relay_service.relay(settings.redis_channel, registry))
        relay_task.add_done_callback(log_relay_exit)
        logger.info(f"Relaying board events from Redis channel '{settings.redis_channel}'")

    yield

    if relay_task is not None:
        relay_task.cancel()
        # A relay that already failed was reported by log_relay_exit
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await relay_task
    if relay_service is not None:
        await relay_service.cleanup()
    notifier.close()


app = FastAPI(
    title="Kanban Board API",
    description="Shared Kanban board with ownership-based editing and live refresh",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    response = await call_next(request)
    logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed input as 400 rather than FastAPI's default 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid data", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# Register routers
app.include_router(auth.router)
app.include_router(board.router)
app.include_router(websocket.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
