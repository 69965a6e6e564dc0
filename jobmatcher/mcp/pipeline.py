# SPDX-License-Identifier: Apache-2.0
# jobmatcher/mcp/pipeline.py
"""
The one request path every transport goes through:

    validate -> rate-limit -> backend -> transform -> render

Transports only supply a session id and a secret provider and wrap the
envelope in their own wire format.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..matching.backend import BackendClient
from ..matching.rate_limiter import RateLimiter, RateLimitResult
from ..matching.transform import transform_job_data
from ..matching.validator import sanitize_parameters, validate_inputs
from ..render import format_matches, to_json
from .error_handler import convert_exception_to_document
from .exceptions import RateLimitExceededError, UnknownToolError, ValidationFailedError
from .secret import SecretProvider
from .tools import RENDER_MODES, tool_names

logger = logging.getLogger(__name__)

KIND_SUCCESS = "success"
KIND_VALIDATION = "validation"
KIND_RATE_LIMIT = "rate_limit"
KIND_ERROR = "error"


def _kind_of(exc: BaseException) -> str:
    if isinstance(exc, ValidationFailedError):
        return KIND_VALIDATION
    if isinstance(exc, RateLimitExceededError):
        return KIND_RATE_LIMIT
    return KIND_ERROR


@dataclass
class ToolCallResult:
    kind: str
    envelope: Dict[str, Any]
    rate_limit: Optional[RateLimitResult] = None

    @property
    def text(self) -> str:
        return to_json(self.envelope)

    def as_mcp_content(self) -> Dict[str, Any]:
        """MCP tools/call result body."""
        return {"content": [{"type": "text", "text": self.text}]}


class ToolPipeline:
    def __init__(
        self,
        limiter: RateLimiter,
        backend_client: BackendClient,
        min_resume_length: int = 500,
        max_resume_length: int = 15000,
    ) -> None:
        self.limiter = limiter
        self.backend = backend_client
        self.min_resume_length = min_resume_length
        self.max_resume_length = max_resume_length

    @classmethod
    def from_settings(cls, settings: Any, limiter: Optional[RateLimiter] = None) -> "ToolPipeline":
        limiter = limiter or RateLimiter(settings.rate_limit_per_minute, settings.rate_limit_window_s)
        return cls(
            limiter,
            BackendClient.from_settings(settings),
            min_resume_length=settings.min_resume_length,
            max_resume_length=settings.max_resume_length,
        )

    async def handle_tool_call(
        self,
        tool_name: str,
        raw_args: Optional[Mapping[str, Any]],
        session_id: str,
        secret_provider: SecretProvider,
    ) -> ToolCallResult:
        """
        Run one tool call. Always returns an envelope; only an unknown tool name raises.

        `secret_provider` is called right before the backend request, never earlier.
        """
        mode = RENDER_MODES.get(tool_name)
        if mode is None:
            raise UnknownToolError(tool_name, tool_names())

        args = dict(raw_args or {})
        quota: Optional[RateLimitResult] = None
        try:
            validation = validate_inputs(
                args, min_length=self.min_resume_length, max_length=self.max_resume_length,
            )
            if not validation.valid:
                raise ValidationFailedError(validation.errors)

            quota = self.limiter.check_limit(session_id)
            if not quota.allowed:
                raise RateLimitExceededError(quota)

            request = sanitize_parameters(args)
            secret = secret_provider()
            payload = await asyncio.to_thread(self.backend.call, request, secret)
            envelope = format_matches(transform_job_data(payload, quota.remaining), mode)
        except Exception as e:
            return ToolCallResult(_kind_of(e), convert_exception_to_document(e, tool_name), quota)

        logger.info(
            "%s ok: %s match(es), %d request(s) left for session",
            tool_name, envelope["metadata"]["total_matches"], quota.remaining,
        )
        return ToolCallResult(KIND_SUCCESS, envelope, quota)
