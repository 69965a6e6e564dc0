# SPDX-License-Identifier: Apache-2.0
# jobmatcher/mcp/error_handler.py
"""
Centralized error handling for the job matcher tools.

Every failure that reaches a tool boundary is turned into the same artifact
envelope a successful call returns, so callers never see a raw exception.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from ..render import format_error, format_rate_limit_error, format_validation_error
from .exceptions import (
    BackendError,
    BackendTransportError,
    RateLimitExceededError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)


def convert_exception_to_document(exception: BaseException, context: str = "") -> Dict[str, Any]:
    """
    Map an exception to its rendered envelope.

    Validation and rate-limit errors get their own documents; backend errors are
    keyed by HTTP status; anything else becomes a generic "Request Failed".
    """
    if isinstance(exception, ValidationFailedError):
        logger.info("%s rejected: %d validation error(s)", context or "tool call", len(exception.errors))
        return format_validation_error(exception.errors)

    if isinstance(exception, RateLimitExceededError):
        logger.info("%s rate limited (%d/%d)", context or "tool call", exception.result.request_count, exception.result.limit)
        return format_rate_limit_error(exception.result, exception.result.limit)

    if isinstance(exception, BackendError):
        logger.warning("Backend error in %s: status=%s", context or "tool call", exception.status)
        return format_error(exception)

    if isinstance(exception, BackendTransportError):
        logger.warning("Backend unreachable in %s: %s", context or "tool call", exception)
        return format_error(exception)

    logger.error("Unexpected error in %s: %s", context or "tool call", exception, exc_info=exception)
    return format_error(exception)


__all__ = ["convert_exception_to_document"]
