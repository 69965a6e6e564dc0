# SPDX-License-Identifier: Apache-2.0
"""
Custom exceptions for the job matcher MCP server.

Failure categories:
- Startup / configuration (missing secret)
- Request rejection before any backend call (validation, rate limit)
- Backend failures (HTTP status known) and transport failures (status unknown)
- Transport misuse (unknown tool, schema-level parameter errors)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class JobMatcherError(Exception):
    """Base exception for the job matcher server."""
    pass


# --- Startup / config ---
class ConfigurationError(JobMatcherError):
    """Raised when configuration validation fails."""
    pass


class AuthenticationMissingError(ConfigurationError):
    """API_AUTH_TOKEN is not available (process env or request-scoped env)."""
    pass


# --- Rejected before the backend call ---
class ValidationFailedError(JobMatcherError):
    """One or more validation rules were violated."""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class RateLimitExceededError(JobMatcherError):
    """Session exceeded its sliding-window quota."""

    def __init__(self, result: Any):
        super().__init__(f"Rate limit exceeded ({result.request_count}/{result.limit})")
        self.result = result


# --- Backend ---
class BackendError(JobMatcherError):
    """Backend answered with a non-2xx status."""

    def __init__(self, status: int, data: Optional[Dict[str, Any]] = None):
        super().__init__(f"Backend API error: {status}")
        self.status = status
        self.data = data if data is not None else {}


class BackendTransportError(JobMatcherError):
    """Network failure, timeout or unreadable body; no status code available."""
    pass


# --- Tool/transport misuse ---
class UnknownToolError(JobMatcherError):
    def __init__(self, tool_name: str, available: List[str]):
        super().__init__(f"Unknown tool: {tool_name}. Available tools: {', '.join(available)}")
        self.tool_name = tool_name
        self.available = list(available)


class ToolParameterError(JobMatcherError):
    """Schema-level parameter violations (unknown/missing/mistyped arguments)."""

    def __init__(self, tool_name: str, errors: List[str]):
        super().__init__(f"Tool validation failed: {', '.join(errors)}")
        self.tool_name = tool_name
        self.errors = list(errors)


__all__ = [
    "JobMatcherError",
    "ConfigurationError",
    "AuthenticationMissingError",
    "ValidationFailedError",
    "RateLimitExceededError",
    "BackendError",
    "BackendTransportError",
    "UnknownToolError",
    "ToolParameterError",
]
