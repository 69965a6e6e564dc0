# SPDX-License-Identifier: Apache-2.0
# jobmatcher/mcp/tools.py
"""
Tool catalogue shared by every transport: names, descriptions and the JSON
input schema advertised through `tools/list` and the REST helpers.

`validate_tool_parameters` is the schema-level gate used by the HTTP and
worker surfaces before dispatch; content rules live in
jobmatcher.matching.validator.
"""
from __future__ import annotations

import copy
import re
from typing import Any, Dict, List, Mapping, Optional

from ..matching.validator import ValidationResult
from ..render import MODE_FULL, MODE_INDEX

MATCH_RESUME = "match_resume"
MATCH_JOBS_TO_APPLY = "match_jobs_to_apply"

RENDER_MODES = {
    MATCH_RESUME: MODE_FULL,
    MATCH_JOBS_TO_APPLY: MODE_INDEX,
}

_PAGINATION_NOTE = (
    "Show only the FIRST 15 jobs initially and tell the user \"Showing jobs 1-15 of [total] "
    "total matches. Type 'more jobs' or 'next page' to see additional opportunities.\" "
    "Show more only when the user asks for 'more jobs', 'next page', 'page 2', etc."
)


def _input_schema(min_length: int, max_length: int) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "resume_text": {
                "type": "string",
                "title": "Resume Text (Full & Clean)",
                "description": (
                    "Well-formatted full resume text. Start with \"[Name] - [Title] ([Total Years] "
                    "years total experience)\" and keep complete work history, skills, education, "
                    "projects and certifications. Remove contact details and decorative symbols."
                ),
                "minLength": min_length,
                "maxLength": max_length,
            },
            "user_experience": {
                "type": "string",
                "title": "Experience Years (Optional Override)",
                "description": (
                    "Years of experience. Only when the user states it; otherwise it is "
                    "extracted from the resume."
                ),
            },
            "keywords": {
                "type": "string",
                "title": "Skills & Keywords (Optional Override)",
                "description": (
                    "Comma-separated skills/technologies. Only when the user names them; "
                    "otherwise they are extracted from the resume."
                ),
                "maxLength": 500,
                "examples": ["python,django,react", "java,spring,microservices"],
            },
            "location": {
                "type": "string",
                "title": "Preferred Locations (Optional Filter)",
                "description": (
                    "Comma-separated city names. Only when the user asks for location filtering. "
                    "Expand states, countries and regions into their major cities and include the "
                    "original term plus common variants (e.g. NYC, New York City, New York)."
                ),
                "maxLength": 5000,
                "examples": ["San Francisco, Austin, New York", "London, Berlin, Amsterdam"],
            },
            "start_date": {
                "type": "string",
                "title": "Search Start Date (Optional Filter)",
                "description": (
                    "YYYY-MM-DD. Only when the user mentions date filtering. "
                    "Requires end_date as well."
                ),
                "pattern": r"^\d{4}-\d{2}-\d{2}$",
                "examples": ["2025-01-15"],
            },
            "end_date": {
                "type": "string",
                "title": "Search End Date (Optional Filter)",
                "description": (
                    "YYYY-MM-DD. Only when the user mentions date filtering. "
                    "Requires start_date as well."
                ),
                "pattern": r"^\d{4}-\d{2}-\d{2}$",
                "examples": ["2025-02-15"],
            },
            "page": {
                "type": "integer",
                "title": "Backend Page",
                "description": "Backend result page (1-1000). Defaults to 1.",
                "minimum": 1,
                "maximum": 1000,
                "default": 1,
            },
            "sort_by": {
                "type": "string",
                "title": "Sort Order",
                "description": (
                    "similarity (default) or date. Use date only when the user explicitly asks for "
                    "newest/latest first; a time period alone does not change the sort."
                ),
                "enum": ["similarity", "date"],
                "default": "similarity",
            },
        },
        "required": ["resume_text"],
        "additionalProperties": False,
    }


def build_tool_definitions(min_length: int = 500, max_length: int = 15000) -> Dict[str, Dict[str, Any]]:
    schema = _input_schema(min_length, max_length)
    return {
        MATCH_RESUME: {
            "name": MATCH_RESUME,
            "description": (
                "ARTIFACT-ONLY TOOL: Find matching job opportunities and render the result as a "
                "Markdown artifact with full job details, without commentary. Use when the user asks "
                "to match, find or search jobs without mentioning applying. " + _PAGINATION_NOTE
            ),
            "inputSchema": copy.deepcopy(schema),
        },
        MATCH_JOBS_TO_APPLY: {
            "name": MATCH_JOBS_TO_APPLY,
            "description": (
                "ARTIFACT-ONLY TOOL: Find matching job opportunities and render ONLY the job index "
                "table (no detailed listings) as a Markdown artifact, without commentary. Use when "
                "the user wants jobs to apply to. " + _PAGINATION_NOTE
            ),
            "inputSchema": copy.deepcopy(schema),
        },
    }


TOOL_DEFINITIONS = build_tool_definitions()


def tool_names() -> List[str]:
    return list(TOOL_DEFINITIONS)


def get_tool_metadata(tool_name: str) -> Optional[Dict[str, Any]]:
    return TOOL_DEFINITIONS.get(tool_name)


def list_tools() -> List[Dict[str, Any]]:
    """tools/list payload: name, description, inputSchema."""
    return [
        {"name": t["name"], "description": t["description"], "inputSchema": t["inputSchema"]}
        for t in TOOL_DEFINITIONS.values()
    ]


def _check_type(key: str, value: Any, prop: Mapping[str, Any]) -> List[str]:
    kind = prop.get("type")
    if kind == "string":
        if not isinstance(value, str):
            return [f"Parameter {key} must be a string"]
        errors = []
        pattern = prop.get("pattern")
        if pattern and not re.search(pattern, value):
            errors.append(f"Parameter {key} format is invalid. Expected format: {pattern}")
        if "enum" in prop and value not in prop["enum"]:
            errors.append(f"Parameter {key} must be one of: {', '.join(prop['enum'])}")
        return errors

    if kind == "integer":
        try:
            number = int(value)
        except (TypeError, ValueError, OverflowError):
            return [f"Parameter {key} must be an integer"]
        if isinstance(value, bool):
            return [f"Parameter {key} must be an integer"]
        errors = []
        if "minimum" in prop and number < prop["minimum"]:
            errors.append(f"Parameter {key} must be at least {prop['minimum']}")
        if "maximum" in prop and number > prop["maximum"]:
            errors.append(f"Parameter {key} must be at most {prop['maximum']}")
        return errors

    return []


def validate_tool_parameters(tool_name: str, params: Optional[Mapping[str, Any]]) -> ValidationResult:
    """Unknown tool, missing required, unknown and mistyped arguments."""
    tool = TOOL_DEFINITIONS.get(tool_name)
    if tool is None:
        return ValidationResult(valid=False, errors=[f"Unknown tool: {tool_name}"])
    if params is not None and not isinstance(params, Mapping):
        return ValidationResult(valid=False, errors=["Tool arguments must be an object"])

    params = params or {}
    schema = tool["inputSchema"]
    errors: List[str] = []

    for required in schema["required"]:
        if params.get(required) is None:
            errors.append(f"Missing required parameter: {required}")

    for key, value in params.items():
        if value is None or value == "":
            continue
        prop = schema["properties"].get(key)
        if prop is None:
            if not schema.get("additionalProperties", True):
                errors.append(f"Unknown parameter: {key}")
            continue
        errors.extend(_check_type(key, value, prop))

    return ValidationResult(valid=not errors, errors=errors)
