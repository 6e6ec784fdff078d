"""Provider adapter protocol and shared result helpers."""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from geo_visibility.data import ProviderFamily, ProviderResult
from geo_visibility.errors import MalformedResponseError
from geo_visibility.scoring.confidence import score_response

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
SNIPPET_LENGTH = 300


@dataclass(frozen=True)
class ProviderAnswer:
    """Raw answer from a provider: body text plus evidence URLs."""

    text: str
    urls: tuple[str, ...] = ()


class CitationChecker(Protocol):
    """Interface every provider adapter implements."""

    platform: str
    family: ProviderFamily

    def is_configured(self) -> bool:
        """Whether the provider's credential is present."""
        ...

    async def answer(self, prompt: str, *, system_prompt: str | None = None) -> ProviderAnswer:
        """Ask the provider a question and return its raw answer.

        Raises:
            httpx.HTTPError: On transport failures, timeouts and non-2xx replies.
            MalformedResponseError: On 2xx replies with an unexpected body.
        """
        ...

    async def check(self, domain: str, query: str) -> ProviderResult:
        """Ask ``query`` and decide whether ``domain`` was cited.

        Never raises for provider-side problems; they become ``error``.
        """
        ...


def unconfigured_result(platform: str, query: str, label: str) -> ProviderResult:
    """Result for a provider that was never called because its key is missing."""
    return ProviderResult(
        platform=platform,
        query=query,
        cited=False,
        confidence=0.0,
        error=f"{label} API key not configured",
        provider_called=False,
    )


def failed_result(platform: str, query: str, error: str) -> ProviderResult:
    """Result for a provider that was called and failed."""
    return ProviderResult(
        platform=platform,
        query=query,
        cited=False,
        confidence=0.0,
        error=error,
        provider_called=True,
    )


def build_result(
    checker: CitationChecker, domain: str, query: str, answer: ProviderAnswer
) -> ProviderResult:
    """Score an answer with the checker's evidence model."""
    verdict = score_response(checker.family, domain, answer.text, answer.urls)
    return ProviderResult(
        platform=checker.platform,
        query=query,
        cited=verdict.cited,
        confidence=verdict.confidence,
        snippet=answer.text[:SNIPPET_LENGTH] if verdict.cited else None,
        provider_called=True,
        sources=answer.urls,
    )


async def guarded_check(
    checker: CitationChecker,
    domain: str,
    query: str,
    *,
    timeout: float,
) -> ProviderResult:
    """Call ``checker.answer`` and convert provider failures into results.

    Timeouts, non-2xx replies, transport errors and malformed bodies all
    produce ``cited=False`` with ``provider_called=True``. Cancellation is
    never swallowed.
    """
    try:
        answer = await checker.answer(query)
    except httpx.TimeoutException:
        logger.warning(f"{checker.platform} timed out after {timeout:g}s for query {query!r}")
        return failed_result(checker.platform, query, f"Timeout after {timeout:g}s")
    except httpx.HTTPStatusError as e:
        logger.warning(
            f"{checker.platform} API error {e.response.status_code} for query {query!r}"
        )
        return failed_result(checker.platform, query, f"API error: {e.response.status_code}")
    except httpx.HTTPError as e:
        logger.warning(f"{checker.platform} request failed for query {query!r}. Error: {e}")
        return failed_result(checker.platform, query, str(e) or type(e).__name__)
    except MalformedResponseError as e:
        logger.warning(f"{checker.platform} returned a malformed body for query {query!r}: {e}")
        return failed_result(checker.platform, query, f"Malformed response: {e}")
    return build_result(checker, domain, query, answer)


def json_body(response: httpx.Response) -> dict[str, Any]:
    """Raise for non-2xx status, then decode a JSON object body."""
    response.raise_for_status()
    try:
        data = response.json()
    except ValueError as e:
        raise MalformedResponseError(f"body is not JSON ({e})") from e
    if not isinstance(data, dict):
        raise MalformedResponseError(f"expected JSON object, got {type(data).__name__}")
    return data


def string_list(values: object) -> tuple[str, ...]:
    """Keep the string entries of a JSON list, tolerating absence."""
    if not isinstance(values, list):
        return ()
    return tuple(v for v in values if isinstance(v, str))
