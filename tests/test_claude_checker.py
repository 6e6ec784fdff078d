"""Tests for ClaudeChecker."""

from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest

from geo_visibility.data import ProviderFamily
from geo_visibility.errors import MalformedResponseError
from geo_visibility.providers.claude import ClaudeChecker, parse_claude_response


@pytest.fixture
def mock_web_search_result() -> MagicMock:
    """Create a mock web search result pointing at the monitored domain."""
    result = MagicMock()
    result.type = "web_search_result"
    result.url = "https://acme.io/features"
    result.title = "Acme features"
    return result


@pytest.fixture
def mock_response(mock_web_search_result: MagicMock) -> MagicMock:
    """Create a mock Messages response with a search result and answer text."""
    tool_result = MagicMock()
    tool_result.type = "web_search_tool_result"
    tool_result.content = [mock_web_search_result]

    text_block = MagicMock()
    text_block.type = "text"
    text_block.text = "Acme (acme.io) is a strong option."

    response = MagicMock()
    response.content = [tool_result, text_block]
    return response


@pytest.fixture
def checker(mock_response: MagicMock) -> ClaudeChecker:
    """Create a checker with mocked API client."""
    c = ClaudeChecker(api_key="test-key")
    object.__setattr__(c._client.messages, "create", AsyncMock(return_value=mock_response))
    return c


def test_family() -> None:
    c = ClaudeChecker(api_key="test-key")
    assert c.platform == "claude"
    assert c.family == ProviderFamily.CITATION_LINK


async def test_unconfigured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CLAUDE_API_KEY", raising=False)
    c = ClaudeChecker()

    result = await c.check("acme.io", "best crm")

    assert not c.is_configured()
    assert not result.provider_called
    assert result.error == "Claude API key not configured"


async def test_cited_via_search_result(checker: ClaudeChecker) -> None:
    result = await checker.check("acme.io", "best crm")

    assert result.cited
    assert result.confidence == 0.90
    assert result.sources == ("https://acme.io/features",)
    assert result.snippet == "Acme (acme.io) is a strong option."


async def test_calls_api_with_web_search_tool(checker: ClaudeChecker) -> None:
    await checker.check("acme.io", "best crm")

    mock_create: AsyncMock = checker._client.messages.create  # type: ignore[union-attr,assignment]
    call_kwargs = dict(mock_create.call_args.kwargs)
    assert call_kwargs["tools"][0]["type"] == "web_search_20250305"
    assert call_kwargs["tools"][0]["name"] == "web_search"
    assert call_kwargs["tools"][0]["max_uses"] == 1
    assert call_kwargs["messages"] == [{"role": "user", "content": "best crm"}]


async def test_api_status_error(checker: ClaudeChecker) -> None:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    error = anthropic.InternalServerError(
        "overloaded", response=httpx.Response(529, request=request), body=None
    )
    object.__setattr__(checker._client.messages, "create", AsyncMock(side_effect=error))

    result = await checker.check("acme.io", "best crm")

    assert result.provider_called
    assert not result.cited
    assert result.error == "API error: 529"


async def test_api_timeout(checker: ClaudeChecker) -> None:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    error = anthropic.APITimeoutError(request=request)
    object.__setattr__(checker._client.messages, "create", AsyncMock(side_effect=error))

    result = await checker.check("acme.io", "best crm")

    assert result.provider_called
    assert result.error == "Timeout after 30s"


def test_parse_rejects_missing_content() -> None:
    response = MagicMock()
    response.content = None
    with pytest.raises(MalformedResponseError):
        parse_claude_response(response)
