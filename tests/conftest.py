"""Shared fixtures: a scriptable provider adapter."""

from collections.abc import Callable

import pytest

from geo_visibility.data import ProviderFamily, ProviderResult
from geo_visibility.providers.base import ProviderAnswer, failed_result, unconfigured_result


class FakeChecker:
    """Provider stand-in that records calls and answers from a script.

    Args:
        platform: Platform name reported on results.
        cited: Queries (exact text) this provider cites.
        configured: Whether the provider has credentials.
        error: If set, every call fails with this error.
        sources: Evidence URLs attached to every result.
    """

    family = ProviderFamily.CITATION_LINK

    def __init__(
        self,
        platform: str,
        *,
        cited: set[str] | None = None,
        cite_all: bool = False,
        configured: bool = True,
        error: str | None = None,
        sources: tuple[str, ...] = (),
        answer_text: str = "",
        answer_urls: tuple[str, ...] = (),
    ) -> None:
        self.platform = platform
        self._cited = cited or set()
        self._cite_all = cite_all
        self._configured = configured
        self._error = error
        self._sources = sources
        self._answer = ProviderAnswer(text=answer_text, urls=answer_urls)
        self.calls: list[tuple[str, str]] = []
        self.prompts: list[str] = []

    def is_configured(self) -> bool:
        return self._configured

    async def answer(self, prompt: str, *, system_prompt: str | None = None) -> ProviderAnswer:
        self.prompts.append(prompt)
        return self._answer

    async def check(self, domain: str, query: str) -> ProviderResult:
        self.calls.append((domain, query))
        if not self._configured:
            return unconfigured_result(self.platform, query, self.platform.title())
        if self._error:
            return failed_result(self.platform, query, self._error)
        cited = self._cite_all or query in self._cited
        return ProviderResult(
            platform=self.platform,
            query=query,
            cited=cited,
            confidence=0.9 if cited else 0.0,
            snippet=f"{domain} is great" if cited else None,
            sources=self._sources,
        )


@pytest.fixture
def make_checker() -> Callable[..., FakeChecker]:
    """Factory for FakeChecker instances."""

    def _make(platform: str, **kwargs: object) -> FakeChecker:
        return FakeChecker(platform, **kwargs)  # type: ignore[arg-type]

    return _make
