import json

import pytest
from fastmcp import Client

from jobmatcher.matching.rate_limiter import RateLimiter
from jobmatcher.mcp.pipeline import ToolPipeline
from jobmatcher.mcp.server import STDIO_SESSION_ID, create_mcp_server
from jobmatcher.mcp.tools import list_tools

from conftest import FakeBackend


def _text(result):
    content = getattr(result, "content", result)
    return content[0].text


@pytest.mark.asyncio
async def test_tools_are_registered():
    mcp = create_mcp_server(ToolPipeline(RateLimiter(10, 60.0), FakeBackend()), lambda: "Bearer t")
    async with Client(mcp) as client:
        names = {tool.name for tool in await client.list_tools()}
    assert {"match_resume", "match_jobs_to_apply", "ping"} <= names


@pytest.mark.asyncio
async def test_match_resume_over_mcp(resume_text):
    backend = FakeBackend()
    pipeline = ToolPipeline(RateLimiter(10, 60.0), backend)
    mcp = create_mcp_server(pipeline, lambda: "Bearer stdio")

    async with Client(mcp) as client:
        result = await client.call_tool("match_resume", {"resume_text": resume_text, "keywords": "python"})

    envelope = json.loads(_text(result))
    assert envelope["metadata"]["document_type"] == "full"
    request, secret = backend.calls[0]
    assert request.keywords == "python"
    assert secret == "Bearer stdio"
    assert pipeline.limiter.get_status(STDIO_SESSION_ID)["request_count"] == 1


@pytest.mark.asyncio
async def test_validation_errors_come_back_as_documents():
    backend = FakeBackend()
    mcp = create_mcp_server(ToolPipeline(RateLimiter(10, 60.0), backend), lambda: "Bearer t")

    async with Client(mcp) as client:
        result = await client.call_tool("match_jobs_to_apply", {"resume_text": "short"})

    assert json.loads(_text(result))["artifact_title"] == "Input Validation Failed"
    assert backend.calls == []


@pytest.mark.asyncio
async def test_stdio_tools_advertise_the_shared_schema():
    mcp = create_mcp_server(ToolPipeline(RateLimiter(10, 60.0), FakeBackend()), lambda: "Bearer t")
    async with Client(mcp) as client:
        advertised = {tool.name: tool.inputSchema for tool in await client.list_tools()}

    for tool in list_tools():
        schema = advertised[tool["name"]]
        assert schema == tool["inputSchema"]
        assert schema["additionalProperties"] is False
        assert schema["properties"]["sort_by"]["enum"] == ["similarity", "date"]
        assert schema["properties"]["resume_text"]["minLength"] == 500
