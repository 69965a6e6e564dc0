# SPDX-License-Identifier: Apache-2.0
# jobmatcher/mcp/routes.py
"""
HTTP routes shared by the FastAPI server and the edge worker.

The two front-ends differ only in how they resolve the session id and the
backend secret for a request, so both are injected:

- session_resolver(request) -> str
- secret_resolver(request)  -> SecretProvider (called lazily by the pipeline)
"""
from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Awaitable, Callable, Dict

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..utils.dates import iso_now
from . import SERVER_NAME, SERVER_VERSION
from .exceptions import ToolParameterError, UnknownToolError
from .jsonrpc import PARSE_ERROR, check_tool_call, dispatch, failure
from .pipeline import KIND_RATE_LIMIT, ToolPipeline
from .secret import SecretProvider
from .tools import TOOL_DEFINITIONS, get_tool_metadata, tool_names

logger = logging.getLogger(__name__)

SessionResolver = Callable[[Request], str]
SecretResolver = Callable[[Request], SecretProvider]

AVAILABLE_ENDPOINTS = [
    "GET /health - Health check",
    "GET /mcp/tools - List available tools",
    "GET /mcp/tools/:name - Get specific tool metadata",
    "POST /mcp/tools/call - Execute a tool",
    "POST / - MCP Protocol endpoint",
    "GET / - SSE endpoint",
]


def _sse_event(event: str, payload: Dict[str, Any]) -> str:
    return f"event: {event}\ndata: {json.dumps(payload)}\n\n"


async def keepalive_stream(
    is_disconnected: Callable[[], Awaitable[bool]],
    interval_s: float,
) -> AsyncIterator[str]:
    """'connected' once, then a 'ping' every interval until the client goes away."""
    yield _sse_event("connected", {"type": "connected"})
    while True:
        await asyncio.sleep(interval_s)
        if await is_disconnected():
            logger.debug("SSE client disconnected")
            return
        yield _sse_event("ping", {"type": "ping"})


def _server_metadata(transport: str) -> Dict[str, Any]:
    return {"server": SERVER_NAME, "version": SERVER_VERSION, "transport": transport}


def build_router(
    pipeline: ToolPipeline,
    *,
    session_resolver: SessionResolver,
    secret_resolver: SecretResolver,
    transport: str,
    keepalive_s: float = 30.0,
) -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    async def health() -> Dict[str, Any]:
        return {
            "status": "healthy",
            "service": "Job Matcher MCP Server",
            "version": SERVER_VERSION,
            "transport": transport,
            "timestamp": iso_now(),
        }

    @router.get("/mcp/tools")
    async def list_tool_metadata() -> Dict[str, Any]:
        return {
            "tools": list(TOOL_DEFINITIONS.values()),
            "count": len(TOOL_DEFINITIONS),
            "metadata": _server_metadata(transport),
        }

    @router.post("/mcp/tools/call")
    async def call_tool(request: Request) -> JSONResponse:
        try:
            body = await request.json()
        except ValueError:
            return JSONResponse({"error": "Invalid JSON body"}, status_code=400)
        if not isinstance(body, dict):
            return JSONResponse({"error": "Request body must be an object"}, status_code=400)

        name, args = body.get("name"), body.get("arguments") or {}
        try:
            check_tool_call(name, args)
        except UnknownToolError as e:
            return JSONResponse(
                {"error": "Unknown tool", "details": f"Tool '{e.tool_name}' not found", "available": e.available},
                status_code=400,
            )
        except ToolParameterError as e:
            return JSONResponse(
                {
                    "error": "Tool validation failed",
                    "details": e.errors,
                    "tool": name,
                    "received_args": sorted(args) if isinstance(args, dict) else [],
                },
                status_code=400,
            )

        result = await pipeline.handle_tool_call(
            name, args, session_resolver(request), secret_resolver(request),
        )
        if result.kind == KIND_RATE_LIMIT:
            reset = datetime.fromtimestamp(result.rate_limit.reset_time, tz=timezone.utc)
            return JSONResponse(
                {
                    "error": "Rate limit exceeded",
                    "details": "Too many requests, please wait",
                    "result": result.text,
                    "resetTime": reset.isoformat(),
                    "remaining": result.rate_limit.remaining,
                },
                status_code=429,
            )

        metadata = _server_metadata(transport)
        if result.rate_limit is not None:
            metadata["rateLimitRemaining"] = result.rate_limit.remaining
        return JSONResponse({
            "result": result.text,
            "tool": name,
            "metadata": metadata,
            "timestamp": iso_now(),
        })

    @router.get("/mcp/tools/{tool_name}")
    async def tool_metadata(tool_name: str) -> JSONResponse:
        meta = get_tool_metadata(tool_name)
        if meta is None:
            return JSONResponse({"error": "Tool not found", "available": tool_names()}, status_code=404)
        return JSONResponse({"tool": meta, "metadata": _server_metadata(transport)})

    @router.post("/")
    async def jsonrpc_endpoint(request: Request) -> Response:
        try:
            body = await request.json()
        except ValueError:
            return JSONResponse(failure(None, PARSE_ERROR, "Parse error"))

        reply = await dispatch(
            body,
            pipeline=pipeline,
            session_id=session_resolver(request),
            secret_provider=secret_resolver(request),
        )
        if reply is None:
            return Response(status_code=200)
        return JSONResponse(reply)

    @router.get("/")
    async def sse(request: Request) -> StreamingResponse:
        return StreamingResponse(
            keepalive_stream(request.is_disconnected, keepalive_s),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )

    return router


def install_not_found_handler(app: FastAPI) -> None:
    """404 body listing the endpoints this server answers."""

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            return JSONResponse(
                {
                    "error": "Not Found",
                    "message": "The requested endpoint was not found",
                    "available_endpoints": AVAILABLE_ENDPOINTS,
                },
                status_code=404,
            )
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)
