# SPDX-License-Identifier: Apache-2.0
# jobmatcher/render/sections.py
"""
Typed Markdown building blocks.

A document is a flat list of sections; render_sections() renders each one
and joins them with a blank line. Every section type has exactly one
renderer, registered on `render_section`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import singledispatch
from typing import Any, List, Optional, Sequence

from ..matching.transform import NormalizedJob

BAND_EMOJI = {"high": "🟢", "medium": "🟡", "low": "🟠"}

# =========================
# Section types
# =========================
@dataclass
class Heading:
    text: str
    level: int = 1


@dataclass
class Paragraph:
    text: str


@dataclass
class Table:
    columns: Sequence[str]
    rows: List[Sequence[Any]]
    widths: Sequence[int]      # dash count per column in the divider row


@dataclass
class JobIndexTable:
    jobs: List[NormalizedJob]
    apply_label: str = "**Apply**"


@dataclass
class JobDetail:
    job: NormalizedJob
    rank: int


@dataclass
class Badges:
    items: Sequence[str]
    title: Optional[str] = None


@dataclass
class BulletList:
    items: Sequence[str]
    marker: str = ""
    title: Optional[str] = None


@dataclass
class CodeBlock:
    text: str


@dataclass
class QuoteBlock:
    sections: List[Any] = field(default_factory=list)


@dataclass
class Rule:
    pass


@dataclass
class Footer:
    text: str


# =========================
# Helpers
# =========================
def fmt_number(value: Any) -> str:
    """1234 -> '1,234'; anything non-numeric is shown as-is."""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float) and value.is_integer():
        return f"{int(value):,}"
    return str(value)


def badges(items: Sequence[str]) -> str:
    return " ".join(f"`{str(item).strip()}`" for item in items)


def cell(value: Any) -> str:
    """Keep backend text from breaking the table grid."""
    return str(value).replace("\n", " ").replace("|", "\\|")


def _row(values: Sequence[Any]) -> str:
    return "| " + " | ".join(str(v) for v in values) + " |"


def _divider(widths: Sequence[int]) -> str:
    return "|" + "|".join("-" * w for w in widths) + "|"


def match_badge(job: NormalizedJob) -> str:
    return f"{BAND_EMOJI[job.match_band]} **{job.match_percent}%**"


# =========================
# Renderers
# =========================
@singledispatch
def render_section(section: Any) -> str:
    raise TypeError(f"Unsupported section type: {type(section).__name__}")


@render_section.register
def _(section: Heading) -> str:
    return f"{'#' * section.level} {section.text}"


@render_section.register
def _(section: Paragraph) -> str:
    return section.text


@render_section.register
def _(section: Table) -> str:
    lines = [_row(section.columns), _divider(section.widths)]
    lines.extend(_row(r) for r in section.rows)
    return "\n".join(lines)


INDEX_COLUMNS = (
    "**#**", "**Company**", "**Position**", "**Score**", "**Location**",
    "**Experience**", "**First Published At**", "**Apply**",
)
INDEX_WIDTHS = (7, 13, 14, 11, 14, 16, 21, 11)


@render_section.register
def _(section: JobIndexTable) -> str:
    rows = [
        (
            rank,
            f"🏢 **{cell(job.company)}**",
            cell(job.title),
            match_badge(job),
            cell(job.location),
            job.experience_label,
            job.posted_relative,
            f"[🚀 {section.apply_label}]({job.apply_url})",
        )
        for rank, job in enumerate(section.jobs, start=1)
    ]
    return render_section(Table(INDEX_COLUMNS, rows, INDEX_WIDTHS))


def job_detail_sections(job: NormalizedJob, rank: int) -> List[Any]:
    sections: List[Any] = [
        Heading(f"{rank}. 🏢 {job.company} - {job.title}", level=2),
        Table(
            ("**Detail**", "**Information**"),
            [
                ("🎯 **Match Score**", match_badge(job)),
                ("💼 **Experience Required**", job.experience_label),
                ("📍 **Location**", cell(job.location)),
                ("📅 **First Published At**", job.posted_relative),
                ("🔗 **Apply**", f"[**Apply Now**]({job.apply_url})"),
            ],
            (12, 18),
        ),
    ]
    if job.required_skills:
        sections.append(Badges(job.required_skills, title="🛠️ Required Skills"))
    if job.summary_points:
        sections.append(BulletList(job.summary_points, marker="✅", title="📋 Job Highlights"))
    sections.append(Rule())
    return sections


@render_section.register
def _(section: JobDetail) -> str:
    return render_sections(job_detail_sections(section.job, section.rank))


@render_section.register
def _(section: Badges) -> str:
    body = badges(section.items)
    return f"### {section.title}\n{body}" if section.title else body


@render_section.register
def _(section: BulletList) -> str:
    prefix = f"- {section.marker} " if section.marker else "- "
    body = "\n".join(f"{prefix}{item}" for item in section.items)
    return f"### {section.title}\n{body}" if section.title else body


@render_section.register
def _(section: CodeBlock) -> str:
    return f"```\n{section.text}\n```"


@render_section.register
def _(section: QuoteBlock) -> str:
    inner = render_sections(section.sections)
    return "\n".join(f"> {line}" for line in inner.split("\n"))


@render_section.register
def _(section: Rule) -> str:
    return "---"


@render_section.register
def _(section: Footer) -> str:
    return f"*{section.text}*"


def render_sections(sections: Sequence[Any]) -> str:
    return "\n\n".join(render_section(s) for s in sections)
