# SPDX-License-Identifier: Apache-2.0
"""
Job Matcher MCP server.

Transports:
- stdio (FastMCP), the default for desktop clients
- HTTP (FastAPI): JSON-RPC on POST /, SSE keep-alive on GET /, REST helpers
- edge worker: the same routes, secret read from the request-scoped env

All three hand tool calls to `pipeline.ToolPipeline`.
"""
SERVER_NAME = "job-matcher-mcp-server"
SERVER_VERSION = "1.0.0"
