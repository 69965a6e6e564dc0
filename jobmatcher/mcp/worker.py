# SPDX-License-Identifier: Apache-2.0
# jobmatcher/mcp/worker.py
"""
Edge-worker transport (Python Workers runtime).

Same routes as the HTTP app. Differences:
- The backend secret comes from the request-scoped `env` binding
  (scope["env"]), read only while a request is being handled.
- Session id: cf-connecting-ip, then x-forwarded-for, then a constant.
- No background sweep: isolates are short-lived and cannot run lifespan tasks.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..settings import SETTINGS
from . import SERVER_VERSION
from .pipeline import ToolPipeline
from .routes import build_router, install_not_found_handler
from .secret import SecretProvider, Secrets

logger = logging.getLogger(__name__)

WORKER_FALLBACK_SESSION = "worker-client"


def worker_session_id(request: Request) -> str:
    headers = request.headers
    # x-forwarded-for is "client, proxy1, proxy2"; key on the client
    forwarded = (headers.get("x-forwarded-for") or "").split(",")[0].strip()
    return headers.get("cf-connecting-ip") or forwarded or WORKER_FALLBACK_SESSION


def binding_secret(request: Request) -> SecretProvider:
    """Provider bound to this request's env; nothing is read until it is called."""
    env = request.scope.get("env")
    return lambda: Secrets.from_binding(env)


def create_worker_app(pipeline: Optional[ToolPipeline] = None, settings: Any = SETTINGS) -> FastAPI:
    pipeline = pipeline or ToolPipeline.from_settings(settings)

    app = FastAPI(title="Job Matcher MCP Server (Worker)", version=SERVER_VERSION)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.include_router(build_router(
        pipeline,
        session_resolver=worker_session_id,
        secret_resolver=binding_secret,
        transport="Cloudflare Workers",
        keepalive_s=settings.sse_keepalive_s,
    ))
    install_not_found_handler(app)
    app.state.pipeline = pipeline
    return app


_app: Optional[FastAPI] = None


def _get_app() -> FastAPI:
    global _app
    if _app is None:
        _app = create_worker_app()
    return _app


async def on_fetch(request: Any, env: Any) -> Any:
    """Workers entry point: hand the request to the ASGI app with `env` in scope."""
    import asgi  # provided by the Workers runtime

    return await asgi.fetch(_get_app(), request, env)
