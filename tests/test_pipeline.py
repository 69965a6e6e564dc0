import json

import pytest

from jobmatcher.matching.rate_limiter import RateLimiter
from jobmatcher.mcp import pipeline as pipeline_module
from jobmatcher.mcp.exceptions import (
    AuthenticationMissingError, BackendError, RateLimitExceededError, UnknownToolError, ValidationFailedError,
)
from jobmatcher.mcp.pipeline import (
    KIND_ERROR, KIND_RATE_LIMIT, KIND_SUCCESS, KIND_VALIDATION, ToolPipeline,
)

from conftest import FakeBackend, make_payload


def _secret():
    return "Bearer test-token"


@pytest.mark.asyncio
async def test_success_returns_full_envelope(pipeline, fake_backend, resume_text):
    result = await pipeline.handle_tool_call("match_resume", {"resume_text": resume_text}, "s1", _secret)

    assert result.kind == KIND_SUCCESS
    assert result.envelope["metadata"]["document_type"] == "full"
    assert result.envelope["metadata"]["total_matches"] == 2
    assert result.rate_limit.remaining == 9
    request, secret = fake_backend.calls[0]
    assert request.resume_text == resume_text
    assert secret == "Bearer test-token"


@pytest.mark.asyncio
async def test_index_tool_renders_index_mode(pipeline, resume_text):
    result = await pipeline.handle_tool_call("match_jobs_to_apply", {"resume_text": resume_text}, "s1", _secret)
    assert result.envelope["metadata"]["document_type"] == "index-only"
    assert result.envelope["artifact_id"].startswith("job-table-markdown-")


@pytest.mark.asyncio
async def test_eleventh_call_is_rate_limited_without_backend_call(pipeline, fake_backend, resume_text):
    for _ in range(10):
        result = await pipeline.handle_tool_call("match_resume", {"resume_text": resume_text}, "s1", _secret)
        assert result.kind == KIND_SUCCESS

    result = await pipeline.handle_tool_call("match_resume", {"resume_text": resume_text}, "s1", _secret)
    assert result.kind == KIND_RATE_LIMIT
    assert result.rate_limit.remaining == 0
    assert result.envelope["artifact_title"] == "Rate Limit Exceeded"
    assert len(fake_backend.calls) == 10


@pytest.mark.asyncio
async def test_validation_failure_skips_quota_and_secret(pipeline, fake_backend):
    secret_calls = []

    def provider():
        secret_calls.append(1)
        return "Bearer x"

    result = await pipeline.handle_tool_call("match_resume", {"resume_text": "too short"}, "s1", provider)

    assert result.kind == KIND_VALIDATION
    assert "Resume text is too short" in result.envelope["content"]
    assert fake_backend.calls == []
    assert secret_calls == []
    assert pipeline.limiter.get_status("s1")["request_count"] == 0


@pytest.mark.asyncio
async def test_zero_matches_give_empty_document(resume_text):
    backend = FakeBackend(make_payload(0, total_matches=0))
    pipeline = ToolPipeline(RateLimiter(10, 60.0), backend)
    result = await pipeline.handle_tool_call("match_jobs_to_apply", {"resume_text": resume_text}, "s1", _secret)

    assert result.kind == KIND_SUCCESS
    assert result.envelope["metadata"]["total_matches"] == 0
    assert result.envelope["artifact_title"] == "Job Search Results - No Matches"


@pytest.mark.asyncio
async def test_backend_error_becomes_error_document(resume_text):
    backend = FakeBackend(error=BackendError(401, {"detail": "bad token"}))
    pipeline = ToolPipeline(RateLimiter(10, 60.0), backend)
    result = await pipeline.handle_tool_call("match_resume", {"resume_text": resume_text}, "s1", _secret)

    assert result.kind == KIND_ERROR
    assert result.envelope["artifact_title"] == "Authentication Error"
    assert result.envelope["performance"]["error_type"] == 401


@pytest.mark.asyncio
async def test_missing_secret_becomes_error_document(pipeline, fake_backend, resume_text):
    def provider():
        raise AuthenticationMissingError("API_AUTH_TOKEN binding is required.")

    result = await pipeline.handle_tool_call("match_resume", {"resume_text": resume_text}, "s1", provider)
    assert result.kind == KIND_ERROR
    assert result.envelope["artifact_title"] == "Request Failed"
    assert fake_backend.calls == []


@pytest.mark.asyncio
async def test_unknown_tool_raises(pipeline, resume_text):
    with pytest.raises(UnknownToolError):
        await pipeline.handle_tool_call("find_jobs", {"resume_text": resume_text}, "s1", _secret)


@pytest.mark.asyncio
async def test_mcp_content_wraps_envelope_text(pipeline, resume_text):
    result = await pipeline.handle_tool_call("match_resume", {"resume_text": resume_text}, "s1", _secret)
    content = result.as_mcp_content()["content"]
    assert content[0]["type"] == "text"
    assert json.loads(content[0]["text"]) == result.envelope


@pytest.mark.asyncio
async def test_rejections_are_rendered_by_the_error_handler(monkeypatch, resume_text):
    seen = []
    real = pipeline_module.convert_exception_to_document

    def recording(exc, context=""):
        seen.append((type(exc), context))
        return real(exc, context)

    monkeypatch.setattr("jobmatcher.mcp.pipeline.convert_exception_to_document", recording)
    pipeline = ToolPipeline(RateLimiter(1, 60.0), FakeBackend())

    await pipeline.handle_tool_call("match_resume", {"resume_text": "short"}, "s1", _secret)
    await pipeline.handle_tool_call("match_resume", {"resume_text": resume_text}, "s1", _secret)
    limited = await pipeline.handle_tool_call("match_resume", {"resume_text": resume_text}, "s1", _secret)

    assert seen == [
        (ValidationFailedError, "match_resume"),
        (RateLimitExceededError, "match_resume"),
    ]
    assert limited.kind == KIND_RATE_LIMIT
    assert limited.rate_limit.remaining == 0
