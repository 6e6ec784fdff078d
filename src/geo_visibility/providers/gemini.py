"""Gemini adapter: answers grounded with Google Search retrieval metadata."""

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
    unconfigured_result,
)
from geo_visibility.url import extract_domain

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

# Grounding chunks usually point at this redirect host and carry the real
# site in ``web.title``.
_REDIRECT_HOST = "vertexaisearch.cloud.google.com"


def _chunk_url(chunk: object) -> str | None:
    if not isinstance(chunk, dict):
        return None
    web = chunk.get("web")
    if not isinstance(web, dict):
        return None
    uri = web.get("uri")
    if not isinstance(uri, str) or not uri:
        return None
    title = web.get("title")
    if extract_domain(uri) == _REDIRECT_HOST and isinstance(title, str) and "." in title:
        return f"https://{title.strip()}"
    return uri


def parse_gemini_response(data: dict[str, Any]) -> ProviderAnswer:
    """Extract answer text and grounding chunk URLs from ``generateContent``.

    Raises:
        MalformedResponseError: If the response has no candidate content.
    """
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        raise MalformedResponseError("missing candidates")
    candidate = candidates[0]
    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        raise MalformedResponseError("missing candidates[0].content.parts")
    text = "".join(
        p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)
    )

    urls: list[str] = []
    metadata = candidate.get("groundingMetadata")
    if isinstance(metadata, dict):
        chunks = metadata.get("groundingChunks")
        if isinstance(chunks, list):
            urls = [url for url in (_chunk_url(c) for c in chunks) if url]
    return ProviderAnswer(text=text, urls=tuple(urls))


class GeminiChecker:
    """Check citations with Gemini and the ``google_search`` grounding tool.

    Args:
        api_key: Google AI key (defaults to GOOGLE_AI_API_KEY, then GEMINI_API_KEY).
        model: Gemini model ID.
        timeout_seconds: Per-request timeout.
        temperature: Sampling temperature.
        max_output_tokens: Response length cap.
    """

    platform = "google_aio"
    family = ProviderFamily.GROUNDED

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str = "gemini-2.5-flash",
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        temperature: float = 0.1,
        max_output_tokens: int = 1024,
    ) -> None:
        self._api_key = (
            api_key or os.environ.get("GOOGLE_AI_API_KEY") or os.environ.get("GEMINI_API_KEY")
        )
        self._model = model
        self._timeout = timeout_seconds
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens

    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def answer(self, prompt: str, *, system_prompt: str | None = None) -> ProviderAnswer:
        payload: dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "tools": [{"google_search": {}}],
            "generationConfig": {
                "temperature": self._temperature,
                "maxOutputTokens": self._max_output_tokens,
            },
        }
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}
        headers = {"x-goog-api-key": self._api_key or ""}
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(
                GEMINI_API_URL.format(model=self._model), json=payload, headers=headers
            )
        return parse_gemini_response(json_body(response))

    async def check(self, domain: str, query: str) -> ProviderResult:
        if not self.is_configured():
            return unconfigured_result(self.platform, query, "Google AI")
        return await guarded_check(self, domain, query, timeout=self._timeout)
