"""OpenAI adapter: knowledge-only answers from model recall."""

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

OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant. If you know about a website or company, "
    "describe what you know. If you don't know, say so clearly."
)


def parse_openai_response(data: dict[str, Any]) -> ProviderAnswer:
    """Extract the message text from a chat completion.

    A null ``content`` (e.g. a refusal) is treated as an empty answer.

    Raises:
        MalformedResponseError: If ``choices[0].message`` is missing.
    """
    try:
        message = data["choices"][0]["message"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponseError(f"missing choices[0].message ({e!r})") from e
    if not isinstance(message, dict):
        raise MalformedResponseError("message is not an object")
    content = message.get("content")
    if content is None:
        return ProviderAnswer(text="")
    if not isinstance(content, str):
        raise MalformedResponseError(f"content is {type(content).__name__}, expected str")
    return ProviderAnswer(text=content)


class OpenAIChecker:
    """Check whether a chat model knows a domain without web access.

    Args:
        api_key: OpenAI API key (defaults to OPENAI_API_KEY env var).
        model: Chat model ID.
        timeout_seconds: Per-request timeout.
        max_completion_tokens: Response length cap.
    """

    platform = "chatgpt"
    family = ProviderFamily.KNOWLEDGE_ONLY

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str = "gpt-5-mini",
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_completion_tokens: int = 4000,
    ) -> None:
        self._api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self._model = model
        self._timeout = timeout_seconds
        self._max_completion_tokens = max_completion_tokens

    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def answer(self, prompt: str, *, system_prompt: str | None = None) -> ProviderAnswer:
        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt or DEFAULT_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "max_completion_tokens": self._max_completion_tokens,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(OPENAI_API_URL, json=payload, headers=headers)
        return parse_openai_response(json_body(response))

    async def check(self, domain: str, query: str) -> ProviderResult:
        if not self.is_configured():
            return unconfigured_result(self.platform, query, "OpenAI")
        return await guarded_check(self, domain, query, timeout=self._timeout)
