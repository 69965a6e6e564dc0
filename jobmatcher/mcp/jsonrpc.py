# SPDX-License-Identifier: Apache-2.0
# jobmatcher/mcp/jsonrpc.py
"""
Minimal MCP JSON-RPC surface for the HTTP and edge-worker front-ends
(mcp-remote talks to POST /).

Supported methods: initialize, notifications/initialized, tools/list,
tools/call, resources/list, prompts/list.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from . import SERVER_NAME, SERVER_VERSION
from .exceptions import ToolParameterError, UnknownToolError
from .pipeline import ToolPipeline
from .secret import SecretProvider
from .tools import get_tool_metadata, list_tools, tool_names, validate_tool_parameters

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class JsonRpcError(Exception):
    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


def success(request_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def failure(request_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}


def initialize_result() -> Dict[str, Any]:
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {"tools": {}, "resources": {}, "prompts": {}},
        "serverInfo": {
            "name": SERVER_NAME,
            "version": SERVER_VERSION,
            "description": "MCP server for job matching backend proxy",
        },
    }


def check_tool_call(name: Any, args: Any) -> None:
    """Raise UnknownToolError / ToolParameterError before anything is dispatched."""
    if not isinstance(name, str) or get_tool_metadata(name) is None:
        raise UnknownToolError(str(name), tool_names())
    validation = validate_tool_parameters(name, args)
    if not validation.valid:
        raise ToolParameterError(name, validation.errors)


async def _call_tool(
    params: Mapping[str, Any],
    pipeline: ToolPipeline,
    session_id: str,
    secret_provider: SecretProvider,
) -> Dict[str, Any]:
    name = params.get("name")
    args = params.get("arguments") or {}
    try:
        check_tool_call(name, args)
    except (UnknownToolError, ToolParameterError) as e:
        raise JsonRpcError(INVALID_PARAMS, str(e)) from e

    logger.info("[MCP] Calling tool %s with args: %s", name, sorted(args))
    result = await pipeline.handle_tool_call(name, args, session_id, secret_provider)
    return result.as_mcp_content()


async def dispatch(
    body: Any,
    *,
    pipeline: ToolPipeline,
    session_id: str,
    secret_provider: SecretProvider,
) -> Optional[Dict[str, Any]]:
    """
    Handle one JSON-RPC message. Returns the response object, or None for
    notifications (answered with an empty 200 by the transport).
    """
    if not isinstance(body, Mapping) or not isinstance(body.get("method"), str):
        return failure(None, INVALID_REQUEST, "Invalid Request")

    method, request_id = body["method"], body.get("id")
    params = body.get("params") or {}
    logger.debug("[MCP] Received %s request (id=%s)", method, request_id)

    try:
        if method == "notifications/initialized":
            logger.info("[MCP] Client initialized successfully")
            return None
        if not isinstance(params, Mapping):
            raise JsonRpcError(INVALID_PARAMS, "params must be an object")

        if method == "initialize":
            result: Any = initialize_result()
        elif method == "tools/list":
            result = {"tools": list_tools()}
        elif method == "tools/call":
            result = await _call_tool(params, pipeline, session_id, secret_provider)
        elif method == "resources/list":
            result = {"resources": []}
        elif method == "prompts/list":
            result = {"prompts": []}
        else:
            raise JsonRpcError(METHOD_NOT_FOUND, f"Unknown method: {method}")
    except JsonRpcError as e:
        return failure(request_id, e.code, e.message)
    except Exception as e:
        logger.error("[MCP] Error handling %s: %s", method, e, exc_info=True)
        return failure(request_id, INTERNAL_ERROR, str(e))

    return success(request_id, result)
