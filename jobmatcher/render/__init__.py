# SPDX-License-Identifier: Apache-2.0
from .envelope import (
    MODE_FULL,
    MODE_INDEX,
    build_envelope,
    format_error,
    format_matches,
    format_rate_limit_error,
    format_validation_error,
    to_json,
)
from .sections import render_sections

__all__ = [
    "MODE_FULL",
    "MODE_INDEX",
    "build_envelope",
    "format_error",
    "format_matches",
    "format_rate_limit_error",
    "format_validation_error",
    "render_sections",
    "to_json",
]
