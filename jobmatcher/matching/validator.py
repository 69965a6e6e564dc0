# SPDX-License-Identifier: Apache-2.0
"""
Input validation for the job matching tools.

Every rule runs independently and all violations are collected. Nothing here
raises: unexpected failures collapse into a single generic error string.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")
REPEATED_CHAR_RE = re.compile(r"(.)\1{20,}")
VALID_SORT_OPTIONS = ("similarity", "date")
MIN_DATE = date(2020, 1, 1)
MAX_RANGE_DAYS = 365

RESUME_SECTION_WORDS = (
    "experience", "education", "skill", "work", "job", "employment",
    "university", "college", "degree", "project", "achievement", "responsibility",
)

STRING_PARAMS = ("user_experience", "keywords", "location", "start_date", "end_date", "sort_by")


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass
class ToolRequest:
    """Validated and sanitized tool input."""
    resume_text: str
    user_experience: Optional[str] = None
    keywords: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    page: Optional[int] = None
    sort_by: Optional[str] = None


def _absent(value: Any) -> bool:
    return value is None or value == ""


def _parse_int(value: Any) -> Optional[int]:
    """Leading-integer parse; '7 years' -> 7, 'abc' -> None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        m = INT_PREFIX_RE.match(value)
        return int(m.group(1)) if m else None
    return None


def _parse_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


# ---------------------------
# Resume text
# ---------------------------
def _validate_required(args: Mapping[str, Any]) -> List[str]:
    text = args.get("resume_text")
    if _absent(text):
        return ["Resume text is required"]
    if not isinstance(text, str):
        return ["Resume text must be provided as a string"]
    return []


def _validate_meaningful_content(text: str, min_length: int) -> List[str]:
    errors: List[str] = []
    normalized = " ".join(text.split())

    if len(normalized) < min_length:
        return ["Resume text contains insufficient content (too much whitespace)"]

    if REPEATED_CHAR_RE.search(text):
        errors.append("Resume text contains suspicious repeated characters")

    if len(normalized.split(" ")) < 10:
        errors.append("Resume text must contain at least 10 words")

    lower = normalized.lower()
    if not any(word in lower for word in RESUME_SECTION_WORDS):
        # sometimes resumes don't use these exact words
        logger.warning("Resume text may not contain typical resume content")

    return errors


def _validate_resume_text(text: str, min_length: int, max_length: int) -> List[str]:
    errors: List[str] = []
    if len(text) < min_length:
        errors.append(f"Resume text is too short. Minimum {min_length} characters required")
    if len(text) > max_length:
        errors.append(f"Resume text is too long. Maximum {max_length} characters allowed")
    errors.extend(_validate_meaningful_content(text, min_length))
    return errors


# ---------------------------
# Optional parameters
# ---------------------------
def _validate_user_experience(value: Any) -> List[str]:
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        return ["User experience must be a string"]
    years = _parse_int(value)
    if years is None:
        return ["User experience must be a valid number"]
    if years < 0:
        return ["User experience cannot be negative"]
    if years > 50:
        return ["User experience seems unusually high (maximum 50 years)"]
    return []


def _validate_list_param(
    value: Any,
    *,
    label: str,
    item_label: str,
    plural: str,
    max_chars: int,
    max_items: int,
) -> List[str]:
    if not isinstance(value, str):
        return [f"{label} must be a string"]

    errors: List[str] = []
    if len(value) > max_chars:
        errors.append(f"{label} string is too long (maximum {max_chars} characters)")

    items = [part.strip() for part in value.split(",") if part.strip()]
    if not items:
        errors.append(
            f"At least one {item_label.lower()} is required when {label.lower()} parameter is provided"
        )
    elif len(items) > max_items:
        errors.append(f"Too many {plural} (maximum {max_items})")

    for item in items:
        if len(item) < 2:
            errors.append(f'{item_label} "{item}" is too short (minimum 2 characters)')
        elif len(item) > 50:
            errors.append(f'{item_label} "{item}" is too long (maximum 50 characters)')
    return errors


def _validate_date(value: Any, field_name: str, today: date) -> List[str]:
    if not isinstance(value, str):
        return [f"{field_name} must be a string"]
    if not DATE_RE.match(value):
        return [f'{field_name} must be in YYYY-MM-DD format (e.g., "2025-01-15")']

    parsed = _parse_date(value)
    if parsed is None:
        return [f"{field_name} is not a valid date"]

    max_date = date(today.year + 2, 12, 31)
    if parsed < MIN_DATE:
        return [f"{field_name} is too far in the past (minimum: 2020-01-01)"]
    if parsed > max_date:
        return [f"{field_name} is too far in the future (maximum: {max_date.year}-12-31)"]
    return []


def _validate_date_pair(start: Any, end: Any) -> List[str]:
    has_start, has_end = not _absent(start), not _absent(end)
    if has_start and not has_end:
        return ["When start_date is provided, end_date must also be provided to create a complete date range"]
    if has_end and not has_start:
        return ["When end_date is provided, start_date must also be provided to create a complete date range"]
    if not (has_start and has_end):
        return []

    start_d = _parse_date(start) if isinstance(start, str) else None
    end_d = _parse_date(end) if isinstance(end, str) else None
    if start_d is None or end_d is None:
        # already reported by the single-date checks
        return []

    errors: List[str] = []
    if start_d >= end_d:
        errors.append("Start date must be before end date")
    if (end_d - start_d).days > MAX_RANGE_DAYS:
        errors.append("Date range is too long (maximum 1 year)")
    return errors


def _validate_page(value: Any) -> List[str]:
    page = _parse_int(value)
    if page is None:
        return ["Page must be a valid number"]
    if page < 1:
        return ["Page must be 1 or greater"]
    if page > 1000:
        return ["Page number is too high (maximum 1000)"]
    return []


def _validate_sort_by(value: Any) -> List[str]:
    if not isinstance(value, str):
        return ["Sort_by must be a string"]
    if value.strip().lower() not in VALID_SORT_OPTIONS:
        return [f"Sort_by must be one of: {', '.join(VALID_SORT_OPTIONS)}"]
    return []


def _validate_optional(args: Mapping[str, Any], today: date) -> List[str]:
    errors: List[str] = []

    if not _absent(args.get("user_experience")):
        errors.extend(_validate_user_experience(args["user_experience"]))

    if not _absent(args.get("keywords")):
        errors.extend(_validate_list_param(
            args["keywords"], label="Keywords", item_label="Keyword", plural="keywords",
            max_chars=500, max_items=50,
        ))

    if not _absent(args.get("location")):
        errors.extend(_validate_list_param(
            args["location"], label="Location", item_label="Location", plural="locations",
            max_chars=5000, max_items=100,
        ))

    for name in ("start_date", "end_date"):
        if not _absent(args.get(name)):
            errors.extend(_validate_date(args[name], name, today))
    errors.extend(_validate_date_pair(args.get("start_date"), args.get("end_date")))

    if not _absent(args.get("page")):
        errors.extend(_validate_page(args["page"]))

    if not _absent(args.get("sort_by")):
        errors.extend(_validate_sort_by(args["sort_by"]))

    return errors


# ---------------------------
# Public API
# ---------------------------
def validate_inputs(
    args: Mapping[str, Any],
    *,
    min_length: int = 500,
    max_length: int = 15000,
    today: Optional[date] = None,
) -> ValidationResult:
    """Validate raw tool arguments. Returns ValidationResult(valid, errors)."""
    try:
        args = args or {}
        today = today or date.today()
        errors = _validate_required(args)
        text = args.get("resume_text")
        if isinstance(text, str) and text:
            errors.extend(_validate_resume_text(text, min_length, max_length))
        errors.extend(_validate_optional(args, today))
        return ValidationResult(valid=not errors, errors=errors)
    except Exception:
        logger.exception("Validation error")
        return ValidationResult(valid=False, errors=["Internal validation error occurred"])


def sanitize_parameters(args: Mapping[str, Any]) -> ToolRequest:
    """
    Trim strings, turn empty strings into None, lower-case sort_by and coerce page.
    Call only after validate_inputs() passed.
    """
    clean: Dict[str, Any] = {}
    for name in STRING_PARAMS:
        value = args.get(name)
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str):
            value = value.strip()
        clean[name] = None if _absent(value) else value

    if clean["sort_by"]:
        clean["sort_by"] = clean["sort_by"].lower()

    page = args.get("page")
    clean["page"] = None if _absent(page) else _parse_int(page)

    return ToolRequest(resume_text=args["resume_text"], **clean)
