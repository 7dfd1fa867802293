"""FastAPI application receiving GitHub webhook notifications.

    GitHub -> POST / -> process_notification -> comment store

Each delivery is handled synchronously in the thread pool; nothing is
shared between deliveries except the immutable settings and the store
client, so concurrent deliveries need no locking.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from robotally_core.config import Settings
from robotally_core.errors import RobotallyError, UpstreamError
from robotally_core.store import CommentStore
from robotally_core.webhook import process_notification

logger = logging.getLogger(__name__)


class NotificationResponse(BaseModel):
    status: str
    action: str


class HealthResponse(BaseModel):
    status: str


async def robotally_error_handler(request: Request, exc: RobotallyError) -> JSONResponse:
    if isinstance(exc, UpstreamError):
        logger.error("Upstream failure while handling notification: %s", exc.detail, exc_info=exc.cause)
    else:
        logger.warning("Rejected notification (%d): %s", exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def create_app(settings: Settings, store: CommentStore) -> FastAPI:
    app = FastAPI(title="robotally", docs_url=None, redoc_url=None)
    app.state.settings = settings
    app.state.store = store
    app.add_exception_handler(RobotallyError, robotally_error_handler)  # type: ignore[arg-type]

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="healthy")

    @app.post("/", response_model=NotificationResponse)
    async def receive_notification(request: Request) -> NotificationResponse:
        body = await request.body()
        outcome = await run_in_threadpool(
            process_notification,
            body,
            dict(request.headers),
            request.app.state.settings,
            request.app.state.store,
        )
        return NotificationResponse(status="ok", action=outcome.action)

    return app
