# SPDX-License-Identifier: Apache-2.0
# jobmatcher/mcp/http_app.py
"""
HTTP transport: FastAPI app for mcp-remote and plain REST clients.

The limiter sweep (RateLimiter.cleanup) runs here, from a lifespan task;
the limiter never schedules itself.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..matching.rate_limiter import RateLimiter
from ..settings import SETTINGS
from . import SERVER_NAME, SERVER_VERSION
from .pipeline import ToolPipeline
from .routes import build_router, install_not_found_handler
from .secret import SecretProvider, Secrets

logger = logging.getLogger(__name__)

HTTP_FALLBACK_SESSION = "http-client"


def peer_session_id(request: Request) -> str:
    client = request.client
    return client.host if client and client.host else HTTP_FALLBACK_SESSION


async def cleanup_loop(limiter: RateLimiter, interval_s: float) -> None:
    while True:
        await asyncio.sleep(interval_s)
        removed = limiter.cleanup()
        if removed:
            logger.debug("Rate limiter cleanup removed %d idle session(s)", removed)


def create_app(
    pipeline: Optional[ToolPipeline] = None,
    settings: Any = SETTINGS,
    secret_provider: Optional[SecretProvider] = None,
) -> FastAPI:
    """Build the HTTP app. The secret is read from the process environment on each backend call."""
    pipeline = pipeline or ToolPipeline.from_settings(settings)
    provider = secret_provider or Secrets.get_token

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Starting %s v%s (HTTP, %d req/%gs per session)",
            SERVER_NAME, SERVER_VERSION, pipeline.limiter.limit, pipeline.limiter.window_seconds,
        )
        task = asyncio.create_task(cleanup_loop(pipeline.limiter, settings.cleanup_interval_s))
        try:
            yield
        finally:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            logger.info("Shutting down %s", SERVER_NAME)

    app = FastAPI(title="Job Matcher MCP Server", version=SERVER_VERSION, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(build_router(
        pipeline,
        session_resolver=peer_session_id,
        secret_resolver=lambda _request: provider,
        transport="HTTP",
        keepalive_s=settings.sse_keepalive_s,
    ))
    install_not_found_handler(app)
    app.state.pipeline = pipeline
    return app


def run(settings: Any = SETTINGS, port: Optional[int] = None) -> None:
    import uvicorn

    app = create_app(settings=settings)
    uvicorn.run(app, host=settings.host, port=port or settings.port, log_config=None)
