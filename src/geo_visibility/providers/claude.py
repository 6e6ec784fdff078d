"""Claude adapter: answers backed by Anthropic's server-side web search."""

import logging
import os
from typing import Any

import anthropic

from geo_visibility.data import ProviderFamily, ProviderResult
from geo_visibility.errors import MalformedResponseError
from geo_visibility.providers.base import (
    DEFAULT_TIMEOUT_SECONDS,
    ProviderAnswer,
    failed_result,
    guarded_check,
    unconfigured_result,
)

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant answering buyer questions. "
    "Search the web and cite the websites you rely on."
)

logger = logging.getLogger(__name__)


def parse_claude_response(response: Any) -> ProviderAnswer:
    """Collect answer text and web search result URLs from a Messages response.

    Raises:
        MalformedResponseError: If the response carries no content list.
    """
    content = getattr(response, "content", None)
    if not isinstance(content, list):
        raise MalformedResponseError("response has no content blocks")

    texts: list[str] = []
    urls: list[str] = []
    for block in content:
        if block.type == "text":
            texts.append(block.text)
        elif block.type == "web_search_tool_result":
            results = block.content
            if isinstance(results, list):
                urls.extend(r.url for r in results if isinstance(getattr(r, "url", None), str))
    return ProviderAnswer(text="".join(texts), urls=tuple(urls))


class ClaudeChecker:
    """Check citations with Claude's built-in web search tool.

    Web search must be enabled in the Anthropic Console.

    Args:
        api_key: Anthropic API key (defaults to CLAUDE_API_KEY env var).
        model: Model to use (default: claude-haiku-4-5-20251001).
        max_searches_per_query: Max web searches per query (default: 1).
        timeout_seconds: Per-request timeout.
    """

    platform = "claude"
    family = ProviderFamily.CITATION_LINK

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str = "claude-haiku-4-5-20251001",
        max_searches_per_query: int = 1,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        resolved_key = api_key or os.environ.get("CLAUDE_API_KEY")
        self._client = (
            anthropic.AsyncAnthropic(api_key=resolved_key, timeout=timeout_seconds, max_retries=0)
            if resolved_key
            else None
        )
        self._model = model
        self._max_searches = max_searches_per_query
        self._timeout = timeout_seconds

    def is_configured(self) -> bool:
        return self._client is not None

    async def answer(self, prompt: str, *, system_prompt: str | None = None) -> ProviderAnswer:
        if self._client is None:
            raise RuntimeError("Claude client is not configured")
        response = await self._client.messages.create(
            model=self._model,
            max_tokens=2048,
            system=system_prompt or DEFAULT_SYSTEM_PROMPT,
            tools=[
                {
                    "type": "web_search_20250305",
                    "name": "web_search",
                    "max_uses": self._max_searches,
                }
            ],
            messages=[{"role": "user", "content": prompt}],
        )
        return parse_claude_response(response)

    async def check(self, domain: str, query: str) -> ProviderResult:
        if not self.is_configured():
            return unconfigured_result(self.platform, query, "Claude")
        try:
            return await guarded_check(self, domain, query, timeout=self._timeout)
        except anthropic.APITimeoutError:
            logger.warning(f"claude timed out after {self._timeout:g}s for query {query!r}")
            return failed_result(self.platform, query, f"Timeout after {self._timeout:g}s")
        except anthropic.APIStatusError as e:
            logger.warning(f"claude API error {e.status_code} for query {query!r}")
            return failed_result(self.platform, query, f"API error: {e.status_code}")
        except anthropic.APIError as e:
            logger.warning(f"claude request failed for query {query!r}. Error: {e}")
            return failed_result(self.platform, query, str(e))
