# SPDX-License-Identifier: Apache-2.0
# jobmatcher/matching/extract.py
"""
Best-effort extraction from a job's free-text `chunk_text` block.

These are pattern searches, not a parser: when a marker is missing they
return an empty list.
"""
from __future__ import annotations

import re
from typing import List, Optional

REQUIRED_SKILLS_RE = re.compile(r"Required Skills:\s*([^\n]+)", re.IGNORECASE)
JOB_SUMMARY_RE = re.compile(r"Job Summary:\s*(.+)", re.IGNORECASE)
POINT_RE = re.compile(r"Point\d+:\s*.*?(?=\s*Point\d+:|$)", re.DOTALL)
POINT_PREFIX_RE = re.compile(r"Point\d+:\s*", re.IGNORECASE)
SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")

MAX_SKILL_LEN = 50
MIN_SENTENCE_LEN = 10
MAX_SENTENCES = 5


def extract_required_skills(chunk_text: Optional[str]) -> List[str]:
    """'Required Skills: Python, SQL' -> ['Python', 'SQL']."""
    if not chunk_text:
        return []
    m = REQUIRED_SKILLS_RE.search(chunk_text)
    if not m:
        return []
    skills = [s.strip() for s in m.group(1).split(",")]
    return [s for s in skills if 0 < len(s) < MAX_SKILL_LEN]


def extract_job_summary(chunk_text: Optional[str]) -> List[str]:
    """
    Bullet points from the 'Job Summary:' line.

    Prefers the enumerated 'Point1: ... Point2: ...' layout; otherwise falls
    back to sentences (longer than 10 chars, at most 5).
    """
    if not chunk_text:
        return []
    m = JOB_SUMMARY_RE.search(chunk_text)
    if not m:
        return []
    summary = m.group(1)

    points = POINT_RE.findall(summary)
    if points:
        cleaned = (POINT_PREFIX_RE.sub("", p, count=1).strip() for p in points)
        return [p for p in cleaned if p]

    sentences = (s.strip() for s in SENTENCE_SPLIT_RE.split(summary))
    return [s for s in sentences if len(s) > MIN_SENTENCE_LEN][:MAX_SENTENCES]
