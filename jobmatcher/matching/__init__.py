# SPDX-License-Identifier: Apache-2.0
"""
Request core: validation, per-session rate limiting, the backend client and
the response transformer. No transport code lives here.
"""
from .backend import BackendClient
from .rate_limiter import RateLimiter, RateLimitResult
from .transform import TransformedData, transform_job_data
from .validator import ToolRequest, ValidationResult, sanitize_parameters, validate_inputs

__all__ = [
    "BackendClient",
    "RateLimiter",
    "RateLimitResult",
    "ToolRequest",
    "TransformedData",
    "ValidationResult",
    "sanitize_parameters",
    "transform_job_data",
    "validate_inputs",
]
