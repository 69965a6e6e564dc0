import json
import re

from jobmatcher.matching.rate_limiter import RateLimitResult
from jobmatcher.matching.transform import transform_job_data
from jobmatcher.mcp.exceptions import BackendError, BackendTransportError
from jobmatcher.render import (
    MODE_FULL, MODE_INDEX, format_error, format_matches, format_rate_limit_error,
    format_validation_error, to_json,
)

from conftest import make_match, make_payload

ROW_RE = re.compile(r"^\| (\d+) \| 🏢 \*\*(.+?)\*\* \| (.+?) \| (🟢|🟡|🟠) \*\*(\d+)%\*\* \|", re.MULTILINE)


def _data(n=3, **overrides):
    return transform_job_data(make_payload(n, **overrides), remaining_quota=9)


def test_index_table_lists_every_job_in_order():
    envelope = format_matches(_data(17, total_matches=17), MODE_INDEX, timestamp=1)
    rows = ROW_RE.findall(envelope["content"])

    assert [int(r[0]) for r in rows] == list(range(1, 18))
    assert [r[1] for r in rows] == [f"Company {i}" for i in range(17)]
    assert all(r[4] == "87" for r in rows)
    assert "[🚀 **Apply Now**](https://jobs.example.com/view/1000)" in envelope["content"]
    assert envelope["artifact_id"] == "job-table-markdown-1"
    assert envelope["metadata"]["document_type"] == MODE_INDEX
    assert "pagination_behavior" in envelope["claude_guidance"]


def test_full_document_has_table_and_details():
    content = format_matches(_data(2), MODE_FULL, timestamp=1)["content"]

    first_row = next(line for line in content.splitlines() if line.startswith("| 1 |"))
    assert first_row.strip("|").count("|") == 7
    assert "## 1. 🏢 Company 0 - Data Engineer 0" in content
    assert "`Python` `SQL`" in content
    assert "- ✅ Build pipelines" in content
    assert "> " in content
    assert content.rstrip().endswith("*Job Matcher v1.0 - Enhanced Backend Integration*")


def test_match_bands_pick_the_badge():
    payload = make_payload(0)
    payload["matches"] = [make_match(0, similarity_score=0.5), make_match(1, similarity_score=0.1)]
    content = format_matches(transform_job_data(payload), MODE_INDEX, timestamp=1)["content"]
    assert [r[3] for r in ROW_RE.findall(content)] == ["🟡", "🟠"]


def test_pipes_in_backend_text_do_not_break_rows():
    payload = make_payload(0)
    payload["matches"] = [make_match(0, company_name="A|B", location="X\nY")]
    content = format_matches(transform_job_data(payload), MODE_INDEX, timestamp=1)["content"]
    row = next(line for line in content.splitlines() if line.startswith("| 1 |"))
    assert "A\\|B" in row
    assert "X Y" in row


def test_zero_matches_select_empty_document():
    data = _data(0, total_matches=0)
    for mode in (MODE_FULL, MODE_INDEX):
        envelope = format_matches(data, mode, timestamp=1)
        assert envelope["artifact_title"] == "Job Search Results - No Matches"
        assert envelope["metadata"]["total_matches"] == 0
        assert envelope["metadata"]["document_type"] == "empty"
        assert "# 🔍 No Job Matches Found" in envelope["content"]
        assert "**API Requests Remaining:** 9" in envelope["content"]


def test_every_outcome_shares_the_envelope_shape():
    result = RateLimitResult(allowed=False, remaining=0, reset_time=1_700_000_000.0, request_count=10, limit=10)
    envelopes = [
        format_matches(_data(1), MODE_FULL),
        format_matches(_data(0), MODE_INDEX),
        format_validation_error(["Resume text is required"]),
        format_rate_limit_error(result, 10),
        format_error(BackendError(500, {"detail": "boom"})),
    ]
    base_keys = set(envelopes[0])
    for envelope in envelopes:
        assert set(envelope) == base_keys
        assert envelope["artifact_type"] == "text/markdown"
        assert {"total_matches", "page", "total_pages", "has_more", "timestamp", "source"} <= set(envelope["metadata"])


def test_validation_error_document():
    envelope = format_validation_error(["Resume text is required", "Page must be 1 or greater"])
    assert envelope["artifact_title"] == "Input Validation Failed"
    assert envelope["artifact_id"].startswith("validation-error-")
    assert "- Resume text is required\n- Page must be 1 or greater" in envelope["content"]
    assert envelope["performance"]["error_type"] == "validation"


def test_rate_limit_document():
    result = RateLimitResult(allowed=False, remaining=0, reset_time=1_700_000_000.0, request_count=10, limit=10)
    envelope = format_rate_limit_error(result, 10)
    assert envelope["artifact_title"] == "Rate Limit Exceeded"
    assert "**Quota:** 10 requests per minute" in envelope["content"]
    assert "**Remaining:** 0" in envelope["content"]


def test_backend_errors_by_status():
    cases = {
        401: "Authentication Error",
        413: "File Too Large",
        500: "Server Error",
        418: "Request Failed",
    }
    for status, title in cases.items():
        envelope = format_error(BackendError(status, {}))
        assert envelope["artifact_title"] == title
        assert f"**Status Code:** {status}" in envelope["content"]


def test_file_processing_error_uses_backend_detail():
    envelope = format_error(BackendError(400, {"detail": "Unsupported file"}))
    assert envelope["artifact_title"] == "File Processing Error"
    assert "Unsupported file" in envelope["content"]


def test_invalid_parameters_shows_details():
    detail = [{"loc": ["body", "page"], "msg": "bad page"}]
    content = format_error(BackendError(422, {"detail": detail}))["content"]
    assert "## 🔧 Technical Details" in content
    assert '"msg": "bad page"' in content


def test_transport_failure_has_unknown_status():
    envelope = format_error(BackendTransportError("Backend request timed out after 30s"))
    assert envelope["artifact_title"] == "Request Failed"
    assert "**Status Code:** unknown" in envelope["content"]


def test_to_json_keeps_emoji():
    text = to_json(format_matches(_data(1), MODE_INDEX, timestamp=1))
    assert "🏢" in text
    assert json.loads(text)["metadata"]["timestamp"] == 1
