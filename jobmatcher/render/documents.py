# SPDX-License-Identifier: Apache-2.0
# jobmatcher/render/documents.py
"""
Document generators. Each returns a list of sections; nothing here touches
the envelope or the clock.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from ..matching.rate_limiter import RateLimitResult
from ..matching.transform import Meta, Processing, TransformedData
from ..mcp.exceptions import BackendError
from ..utils.dates import clock_label
from .sections import (
    BulletList, CodeBlock, Footer, Heading, JobDetail, JobIndexTable,
    Paragraph, QuoteBlock, Rule, Table, badges, fmt_number,
)

FULL_FOOTER = "Job Matcher v1.0 - Enhanced Backend Integration"
INDEX_FOOTER = "Job Index Table v1.0 - Quick Apply Mode"
SERVER_FOOTER = "Job Matcher v1.0 - Powered by MCP Server"


# =========================
# Shared blocks
# =========================
def _summary_table(meta: Meta) -> Table:
    rows: List[Sequence[Any]] = [
        ("🎯 **Total Matches**", f"**{fmt_number(meta.total)} Job Opportunities**"),
    ]
    if meta.experience:
        rows.append(("👨‍💼 **Experience Level**", f"{meta.experience} years"))
    if meta.skills:
        rows.append(("🛠️ **Detected Skills**", badges(meta.skills)))
    return Table(("**Metric**", "**Value**"), rows, (12, 11))


def _enhancement(processing: Processing) -> str:
    return "✅ Enhanced" if processing.enhanced else "⚠️ Standard"


def _processing_summary(processing: Optional[Processing]) -> List[Any]:
    if processing is None:
        return []
    rows: List[Sequence[Any]] = [
        ("**📄 File**", processing.filename),
        ("**⚙️ Method**", processing.method),
        ("**✨ Enhancement**", _enhancement(processing)),
    ]
    if processing.original_length and processing.enhanced_length:
        rows.append(("**📏 Original Length**", f"{fmt_number(processing.original_length)} characters"))
        rows.append(("**📏 Enhanced Length**", f"{fmt_number(processing.enhanced_length)} characters"))
    return [
        Heading("📊 Resume Processing Summary", level=2),
        Table(("Processing Info", "Details"), rows, (16, 10)),
    ]


def _backend_metadata(meta: Meta, tagline: str) -> List[Any]:
    rows: List[Sequence[Any]] = [
        ("**📊 Total Matches**", f"{fmt_number(meta.total)} opportunities"),
        ("**🔄 Has More Results**", "Yes" if meta.has_more else "No"),
    ]
    if meta.experience:
        rows.append(("**👨‍💼 Experience Level**", f"{meta.experience} years"))
    if meta.skills:
        rows.append(("**🎯 Skills Detected**", f"{len(meta.skills)} skills identified"))
    return [
        Heading("🚀 Backend Response Metadata", level=2),
        QuoteBlock([
            Heading("📡 **API Response Details**", level=3),
            Table(("Metadata", "Value"), rows, (10, 7)),
            Paragraph(f"*{tagline}*"),
        ]),
    ]


# =========================
# Result documents
# =========================
def full_document(data: TransformedData) -> List[Any]:
    """Dashboard: summary, index table, one detail section per job, processing and metadata."""
    sections: List[Any] = [
        Heading("🎯 Job Search Results Dashboard"),
        Heading("📊 Search Summary", level=2),
        _summary_table(data.meta),
    ]
    if data.jobs:
        sections += [
            Heading("📑 Job Opportunities Index", level=2),
            JobIndexTable(data.jobs, apply_label="**Apply**"),
            Rule(),
        ]
    sections += [JobDetail(job, rank) for rank, job in enumerate(data.jobs, start=1)]
    sections += _processing_summary(data.processing)
    sections += _backend_metadata(data.meta, "🔧 Powered by Backend API - Real-time job matching")
    sections += [Rule(), Footer(FULL_FOOTER)]
    return sections


def index_document(data: TransformedData) -> List[Any]:
    """Apply-ready table only; no per-job detail sections."""
    sections: List[Any] = [
        Heading("🎯 Job Opportunities to Apply"),
        Heading("📊 Search Summary", level=2),
        _summary_table(data.meta),
    ]
    if data.jobs:
        sections += [
            Heading("📋 Jobs Ready to Apply", level=2),
            JobIndexTable(data.jobs, apply_label="**Apply Now**"),
        ]
    sections += _processing_summary(data.processing)
    sections += _backend_metadata(data.meta, "🔧 Powered by Backend API - Ready-to-Apply Job Index")
    sections += [Rule(), Footer(INDEX_FOOTER)]
    return sections


POSSIBLE_ISSUES = (
    "Very specific location filters",
    "Narrow date range constraints",
    "Highly specialized skill requirements",
    "Resume optimization may be needed",
)

EMPTY_TIPS = (
    "Expand to nearby locations",
    "Remove restrictive filters",
    "Try different keywords",
    "Consider related job titles",
    "Broaden your search criteria",
)

AUTO_APPLY_FEATURES = (
    "✨ Apply to multiple opportunities with one click when new matches are found",
    "🤖 AI-powered application templates",
    "📝 Customized cover letters",
    "⚡ Automated application submission",
)


def empty_document(data: TransformedData) -> List[Any]:
    """Zero matches. Identical for both tools."""
    meta, processing = data.meta, data.processing
    sections: List[Any] = [
        Heading("🔍 No Job Matches Found"),
        Paragraph("Unfortunately, no job opportunities match your current search criteria."),
    ]
    if meta.quota is not None:
        sections.append(Paragraph(f"**API Requests Remaining:** {meta.quota}"))
    if meta.skills:
        sections += [
            Heading("🌟 Skills Detected in Your Resume", level=2),
            Paragraph(", ".join(str(s) for s in meta.skills)),
        ]
    sections += [
        Rule(),
        Heading("⚠️ Possible Issues", level=2),
        BulletList(POSSIBLE_ISSUES),
        Heading("💡 Troubleshooting Tips", level=2),
        BulletList(EMPTY_TIPS, marker="✓"),
    ]
    if processing is not None:
        sections += [
            Heading("📊 Resume Processing Details", level=2),
            Paragraph(f"**File:** {processing.filename}"),
            Paragraph(f"**Processing Method:** {processing.method}"),
            Paragraph(f"**Enhancement Used:** {_enhancement(processing)}"),
        ]
        if processing.original_length and processing.enhanced_length:
            sections += [
                Paragraph(f"**Original Length:** {processing.original_length} characters"),
                Paragraph(f"**Enhanced Length:** {processing.enhanced_length} characters"),
            ]
    sections += [
        Heading("🚀 Coming Soon: Auto-Apply Feature", level=2),
        Paragraph("We're developing an exciting new feature that will allow you to:"),
        BulletList(AUTO_APPLY_FEATURES),
        Paragraph("*Feature currently in development*"),
        Rule(),
        Footer(SERVER_FOOTER),
    ]
    return sections


# =========================
# Error documents
# =========================
def validation_error_document(errors: Sequence[str]) -> List[Any]:
    return [
        Heading("❌ Input Validation Failed"),
        Paragraph("Please fix the following issues and try again:"),
        Heading("Validation Errors", level=2),
        BulletList(errors),
        Paragraph("Please correct these issues and retry your request."),
        Rule(),
        Footer(SERVER_FOOTER),
    ]


def rate_limit_document(result: RateLimitResult, quota: int) -> List[Any]:
    info = "\n".join([
        f"**Quota:** {quota} requests per minute",
        f"**Reset Time:** {clock_label(result.reset_time)}",
        f"**Remaining:** {result.remaining}",
    ])
    return [
        Heading("⏱️ Rate Limit Exceeded"),
        Paragraph(
            "You've reached the maximum number of requests allowed per minute. "
            "Please wait a moment before trying again."
        ),
        Heading("Rate Limit Information", level=2),
        Paragraph(info),
        Paragraph("Please try again after the reset time."),
        Rule(),
        Footer(SERVER_FOOTER),
    ]


@dataclass
class ErrorInfo:
    title: str = "Request Failed"
    message: str = "An unexpected error occurred while processing your request."
    suggestions: List[str] = field(default_factory=list)
    technical_details: str = ""
    status: Any = "unknown"


def describe_error(exc: BaseException) -> ErrorInfo:
    """Title, message and tips for a failed call, keyed by backend status."""
    info = ErrorInfo()
    if not isinstance(exc, BackendError):
        return info

    info.status = exc.status
    detail = exc.data.get("detail") if isinstance(exc.data, dict) else None
    if exc.status == 401:
        info.title = "Authentication Error"
        info.message = "Invalid API authentication. Please check your configuration."
        info.suggestions = ["Contact support if this issue persists"]
    elif exc.status == 400:
        info.title = "File Processing Error"
        info.message = str(detail) if detail else "Unable to process the uploaded file."
        info.suggestions = [
            "Try uploading a different file format (PDF, DOCX, DOC, TXT)",
            "Ensure your file is not corrupted",
        ]
    elif exc.status == 413:
        info.title = "File Too Large"
        info.message = "The uploaded file exceeds the maximum size limit of 10MB."
        info.suggestions = ["Try compressing your resume", "Use a different file format"]
    elif exc.status == 422:
        info.title = "Invalid Parameters"
        info.message = "Some parameters are invalid."
        if detail:
            info.technical_details = json.dumps(detail, indent=2, ensure_ascii=False)
    elif exc.status == 500:
        info.title = "Server Error"
        info.message = "The backend server encountered an error."
        info.suggestions = [
            "Please try again in a few moments",
            "Contact support if the issue persists",
        ]
    return info


def backend_error_document(info: ErrorInfo) -> List[Any]:
    sections: List[Any] = [Heading(f"⚠️ {info.title}"), Paragraph(info.message)]
    if info.suggestions:
        sections += [
            Heading("💡 Troubleshooting Tips", level=2),
            BulletList(info.suggestions, marker="✓"),
        ]
    if info.technical_details:
        sections += [
            Heading("🔧 Technical Details", level=2),
            CodeBlock(info.technical_details),
        ]
    sections += [
        Paragraph(f"**Status Code:** {info.status}"),
        Rule(),
        Footer(SERVER_FOOTER),
    ]
    return sections


__all__ = [
    "ErrorInfo",
    "backend_error_document",
    "describe_error",
    "empty_document",
    "full_document",
    "index_document",
    "rate_limit_document",
    "validation_error_document",
]
