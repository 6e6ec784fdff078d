"""Perplexity adapter: search-grounded answers with explicit citation links."""

import os
from typing import Any

import httpx

from geo_visibility.data import ProviderFamily, ProviderResult
from geo_visibility.errors import MalformedResponseError
from geo_visibility.providers.base import (
    DEFAULT_TIMEOUT_SECONDS,
    ProviderAnswer,
    guarded_check,
    json_body,
    string_list,
    unconfigured_result,
)

PERPLEXITY_API_URL = "https://api.perplexity.ai/chat/completions"
DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant. Always cite your sources when possible."


def parse_perplexity_response(data: dict[str, Any]) -> ProviderAnswer:
    """Extract the answer text and citation URLs from a chat completion.

    Citation URLs come from ``citations`` when present, otherwise from
    ``search_results[].url``.

    Raises:
        MalformedResponseError: If no message content can be found.
    """
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponseError(f"missing choices[0].message.content ({e!r})") from e
    if not isinstance(content, str):
        raise MalformedResponseError(f"content is {type(content).__name__}, expected str")

    urls = string_list(data.get("citations"))
    if not urls:
        search_results = data.get("search_results")
        if isinstance(search_results, list):
            urls = string_list([r.get("url") for r in search_results if isinstance(r, dict)])
    return ProviderAnswer(text=content, urls=urls)


class PerplexityChecker:
    """Check citations with Perplexity's ``sonar`` models.

    Args:
        api_key: Perplexity API key (defaults to PERPLEXITY_API_KEY env var).
        model: Model to query (default: sonar).
        timeout_seconds: Per-request timeout.
    """

    platform = "perplexity"
    family = ProviderFamily.CITATION_LINK

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str = "sonar",
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._api_key = api_key or os.environ.get("PERPLEXITY_API_KEY")
        self._model = model
        self._timeout = timeout_seconds

    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def answer(self, prompt: str, *, system_prompt: str | None = None) -> ProviderAnswer:
        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt or DEFAULT_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "return_citations": True,
            "return_related_questions": False,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(PERPLEXITY_API_URL, json=payload, headers=headers)
        return parse_perplexity_response(json_body(response))

    async def check(self, domain: str, query: str) -> ProviderResult:
        if not self.is_configured():
            return unconfigured_result(self.platform, query, "Perplexity")
        return await guarded_check(self, domain, query, timeout=self._timeout)
