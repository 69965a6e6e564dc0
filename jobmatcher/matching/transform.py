# SPDX-License-Identifier: Apache-2.0
# jobmatcher/matching/transform.py
"""
Backend JSON -> display-ready job list + metadata.

Pure: no I/O, no clock access unless `now` is omitted. Jobs keep the order the
backend returned them in.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from ..utils.dates import relative_label
from .extract import extract_job_summary, extract_required_skills

HIGH_MATCH = 70
MEDIUM_MATCH = 40

WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class NormalizedJob:
    id: str
    title: str
    company: str
    location: str
    match_percent: int
    match_band: str
    apply_url: str
    posted_relative: str
    experience_label: str
    salary: str
    job_type: str
    description: str
    required_skills: List[str] = field(default_factory=list)
    summary_points: List[str] = field(default_factory=list)


@dataclass
class Meta:
    total: int = 0
    page: int = 1
    total_pages: int = 0
    has_more: bool = False
    skills: List[str] = field(default_factory=list)
    experience: Any = None
    keywords: Any = None
    quota: Optional[int] = None


@dataclass
class Processing:
    filename: Any = None
    method: Any = None
    enhanced: bool = False
    original_length: Optional[int] = None
    enhanced_length: Optional[int] = None


@dataclass
class TransformedData:
    jobs: List[NormalizedJob]
    meta: Meta
    processing: Optional[Processing] = None


def match_percent(similarity_score: Any) -> int:
    """0.873 -> 87. Halves round up."""
    try:
        score = float(similarity_score or 0)
    except (TypeError, ValueError):
        score = 0.0
    return int(math.floor(score * 100 + 0.5))


def match_band(percent: int) -> str:
    if percent >= HIGH_MATCH:
        return "high"
    if percent >= MEDIUM_MATCH:
        return "medium"
    return "low"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def generate_job_id(job: Mapping[str, Any], index: int) -> str:
    """
    job_<slug>_<index>. Not unique across backend calls, so never use it as a key.
    """
    link = job.get("job_link")
    if link:
        slug = str(link).split("/")[-1]
    else:
        base = f"{_text(job.get('company_name'))}_{_text(job.get('job_title'))}"
        slug = WHITESPACE_RE.sub("_", base).lower()
    return f"job_{slug}_{index}"


def experience_label(years: Any) -> str:
    # 0 and missing both read as unspecified
    return f"{years} years" if years else "Not specified"


def _normalize_job(job: Mapping[str, Any], index: int, now: Optional[datetime]) -> NormalizedJob:
    pct = match_percent(job.get("similarity_score"))
    chunk = job.get("chunk_text")
    return NormalizedJob(
        id=generate_job_id(job, index),
        title=job.get("job_title") or "Job Title Not Available",
        company=job.get("company_name") or "Company Not Specified",
        location=job.get("location") or "Location Not Specified",
        match_percent=pct,
        match_band=match_band(pct),
        apply_url=job.get("job_link") or "#",
        posted_relative=relative_label(job.get("first_published"), now=now),
        experience_label=experience_label(job.get("min_experience_years")),
        salary=job.get("salary") or "Salary not specified",
        job_type=job.get("job_type") or "Job type not specified",
        description=chunk or "No description available",
        required_skills=extract_required_skills(chunk),
        summary_points=extract_job_summary(chunk),
    )


def _processing(raw: Any) -> Optional[Processing]:
    if not raw or not isinstance(raw, Mapping):
        return None
    return Processing(
        filename=raw.get("filename"),
        method=raw.get("parsing_method"),
        enhanced=bool(raw.get("enhancement_used")),
        original_length=raw.get("original_length"),
        enhanced_length=raw.get("enhanced_length"),
    )


def transform_job_data(
    backend_response: Mapping[str, Any],
    remaining_quota: Optional[int] = None,
    now: Optional[datetime] = None,
) -> TransformedData:
    data: Mapping[str, Any] = backend_response or {}
    matches = data.get("matches") or []

    jobs = [_normalize_job(job, i, now) for i, job in enumerate(matches)]
    meta = Meta(
        total=data.get("total_matches") or 0,
        page=data.get("page") or 1,
        total_pages=data.get("total_pages") or 0,
        has_more=bool(data.get("has_more")),
        skills=list(data.get("extracted_skills") or []),
        experience=data.get("user_experience"),
        keywords=data.get("keywords"),
        quota=remaining_quota,
    )
    return TransformedData(jobs=jobs, meta=meta, processing=_processing(data.get("resume_processing")))


def metadata_summary(data: TransformedData) -> Dict[str, Any]:
    """Pagination fields echoed into the envelope metadata."""
    return {
        "total_matches": data.meta.total,
        "page": data.meta.page,
        "total_pages": data.meta.total_pages,
        "has_more": data.meta.has_more,
    }
