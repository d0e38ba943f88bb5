"""The FastMCP tool server, driven in-process through a FastMCP client."""

import json

import httpx
import pytest
from fastmcp import Client

from perplexica_tools.mcp_server import create_server

from tests.conftest import BASE_URL


def _text(result) -> str:
    return result.content[0].text


class TestToolRegistration:
    @pytest.mark.asyncio
    async def test_both_tools_are_listed(self, settings):
        async with Client(create_server(settings)) as client:
            tools = {tool.name: tool for tool in await client.list_tools()}

        assert set(tools) == {"perplexica.search", "perplexica.health"}
        search_schema = tools["perplexica.search"].inputSchema
        assert search_schema["required"] == ["query"]
        assert search_schema["properties"]["focusMode"]["enum"] == [
            "webSearch",
            "academicSearch",
            "writingAssistant",
            "wolframAlphaSearch",
            "youtubeSearch",
            "redditSearch",
        ]
        assert search_schema["properties"]["baseUrl"]["default"] == BASE_URL
        assert search_schema["properties"]["timeoutMs"]["default"] == settings.default_timeout_ms
        assert "query" not in tools["perplexica.health"].inputSchema["properties"]


class TestToolCalls:
    @pytest.mark.asyncio
    async def test_search_success(self, settings, fake_upstream):
        _, http = fake_upstream(lambda request: httpx.Response(200, json={
            "message": "Answer",
            "sources": [{"metadata": {"title": "Doc", "url": "https://doc"}}],
        }))

        async with Client(create_server(settings, http_client=http)) as client:
            result = await client.call_tool("perplexica.search", {"query": "q"}, raise_on_error=False)

        assert not result.is_error
        assert _text(result) == "Answer\n\n---\n\nSources:\n1. **Doc**: https://doc"

    @pytest.mark.asyncio
    async def test_search_forwards_nested_records(self, settings, fake_upstream):
        upstream, http = fake_upstream(lambda request: httpx.Response(200, json={"message": "ok"}))

        async with Client(create_server(settings, http_client=http)) as client:
            await client.call_tool(
                "perplexica.search",
                {
                    "query": "q",
                    "chatModel": {"provider": "custom_openai", "customOpenAIBaseURL": "http://llm/v1"},
                    "systemInstructions": "Be brief.",
                },
            )

        (request,) = upstream.requests
        body = json.loads(request.content)
        assert body["chatModel"] == {"provider": "custom_openai", "customOpenAIBaseURL": "http://llm/v1"}
        assert body["systemInstructions"] == "Be brief."
        assert "embeddingModel" not in body
        assert "history" not in body
        assert body["stream"] is False

    @pytest.mark.asyncio
    async def test_upstream_failure_is_an_error_result(self, settings, fake_upstream):
        _, http = fake_upstream(lambda request: httpx.Response(500, text="boom"))

        async with Client(create_server(settings, http_client=http)) as client:
            result = await client.call_tool("perplexica.search", {"query": "q"}, raise_on_error=False)

        assert result.is_error
        assert "[UPSTREAM_ERROR]" in _text(result)
        assert "boom" in _text(result)

    @pytest.mark.asyncio
    async def test_empty_query_is_validation_error(self, settings, fake_upstream):
        upstream, http = fake_upstream(lambda request: httpx.Response(200, json={}))

        async with Client(create_server(settings, http_client=http)) as client:
            result = await client.call_tool("perplexica.search", {"query": ""}, raise_on_error=False)

        assert result.is_error
        assert "[VALIDATION_ERROR]" in _text(result)
        assert upstream.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "arguments, field",
        [
            ({}, "query"),
            ({"query": "q", "focusMode": "imageSearch"}, "focusMode"),
            ({"query": "q", "timeoutMs": "soon"}, "timeoutMs"),
            ({"query": "q", "timeoutMs": True}, "timeoutMs"),
            ({"query": "q", "timeoutMs": 0}, "timeoutMs"),
        ],
    )
    async def test_schema_rejections_are_validation_errors(self, settings, fake_upstream, arguments, field):
        upstream, http = fake_upstream(lambda request: httpx.Response(200, json={}))

        async with Client(create_server(settings, http_client=http)) as client:
            result = await client.call_tool("perplexica.search", arguments, raise_on_error=False)

        assert result.is_error
        text = _text(result)
        assert text.startswith("[VALIDATION_ERROR] Invalid arguments: ")
        assert field in text
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_health_rejects_boolean_timeout(self, settings, fake_upstream):
        upstream, http = fake_upstream(lambda request: httpx.Response(200, json={"models": {}}))

        async with Client(create_server(settings, http_client=http)) as client:
            result = await client.call_tool("perplexica.health", {"timeoutMs": True}, raise_on_error=False)

        assert result.is_error
        assert _text(result).startswith("[VALIDATION_ERROR] ")
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_health(self, settings, fake_upstream):
        _, http = fake_upstream(
            lambda request: httpx.Response(200, json={"models": {"openai": [1, 2], "ollama": [1]}})
        )

        async with Client(create_server(settings, http_client=http)) as client:
            result = await client.call_tool("perplexica.health", {}, raise_on_error=False)

        assert not result.is_error
        assert _text(result) == f"OK: reachable at {BASE_URL}. Providers: 2, total models: 3."
