# SPDX-License-Identifier: Apache-2.0
# jobmatcher/mcp/server.py
"""
FastMCP server for the job matcher tools (stdio transport).

- Registers match_resume, match_jobs_to_apply and a 'ping' utility.
- Every tool call goes through ToolPipeline; tools return the envelope JSON text.
- One desktop client per process, so all calls share one rate-limit session.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Dict, Optional

from fastmcp import FastMCP  # type: ignore
from fastmcp.tools import FunctionTool  # type: ignore

from ..settings import SETTINGS
from . import SERVER_NAME, SERVER_VERSION
from .pipeline import ToolPipeline
from .secret import SecretProvider, Secrets
from .tools import MATCH_JOBS_TO_APPLY, MATCH_RESUME, TOOL_DEFINITIONS

logger = logging.getLogger(__name__)

STDIO_SESSION_ID = "claude-desktop-session"


def _collect_args(**params: Any) -> Dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None}


def _add_shared_tool(mcp: FastMCP, fn: Callable[..., Any], name: str) -> None:
    """
    Register `fn` under `name`, advertising the shared input schema instead of
    the one derived from the signature. Arguments are still bound through the
    signature; content rules are left to the pipeline validator.
    """
    definition = TOOL_DEFINITIONS[name]
    tool = FunctionTool.from_function(fn, name=name, description=definition["description"])
    mcp.add_tool(tool.model_copy(update={"parameters": copy.deepcopy(definition["inputSchema"])}))


def create_mcp_server(
    pipeline: Optional[ToolPipeline] = None,
    secret_provider: Optional[SecretProvider] = None,
) -> FastMCP:
    """Create the MCP server with both job matching tools registered."""
    pipeline = pipeline or ToolPipeline.from_settings(SETTINGS)
    secret_provider = secret_provider or Secrets.get_token
    mcp = FastMCP(SERVER_NAME)

    async def _run(tool_name: str, args: Dict[str, Any]) -> str:
        logger.info("Calling tool %s with args: %s", tool_name, sorted(args))
        result = await pipeline.handle_tool_call(tool_name, args, STDIO_SESSION_ID, secret_provider)
        return result.text

    async def match_resume(
        resume_text: str,
        user_experience: Optional[str] = None,
        keywords: Optional[str] = None,
        location: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        page: Optional[int] = None,
        sort_by: Optional[str] = None,
    ) -> str:
        return await _run(MATCH_RESUME, _collect_args(
            resume_text=resume_text, user_experience=user_experience, keywords=keywords,
            location=location, start_date=start_date, end_date=end_date, page=page, sort_by=sort_by,
        ))

    async def match_jobs_to_apply(
        resume_text: str,
        user_experience: Optional[str] = None,
        keywords: Optional[str] = None,
        location: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        page: Optional[int] = None,
        sort_by: Optional[str] = None,
    ) -> str:
        return await _run(MATCH_JOBS_TO_APPLY, _collect_args(
            resume_text=resume_text, user_experience=user_experience, keywords=keywords,
            location=location, start_date=start_date, end_date=end_date, page=page, sort_by=sort_by,
        ))

    _add_shared_tool(mcp, match_resume, MATCH_RESUME)
    _add_shared_tool(mcp, match_jobs_to_apply, MATCH_JOBS_TO_APPLY)

    # Health check
    @mcp.tool()
    async def ping() -> Dict[str, Any]:
        """Lightweight health check."""
        return {
            "status": "ok",
            "service": SERVER_NAME,
            "version": SERVER_VERSION,
            "mode": "stdio",
            "rate_limit": pipeline.limiter.get_status(STDIO_SESSION_ID),
        }

    return mcp
