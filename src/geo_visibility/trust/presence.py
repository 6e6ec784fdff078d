"""Ask a search-backed provider whether a domain is listed on review directories."""

import asyncio
import logging
from collections.abc import Sequence

import httpx

from geo_visibility.data import TrustListing
from geo_visibility.providers.base import CitationChecker
from geo_visibility.trust.sources import DEFAULT_PRESENCE_SOURCES

logger = logging.getLogger(__name__)

PRESENCE_PROMPT = "Is {domain} listed on {source}? If yes, what's the profile URL?"
PRESENCE_SYSTEM_PROMPT = (
    "Answer with yes or no, then provide the URL if available. Be concise."
)

_NEGATIVE_PHRASES = ("no", "not listed", "not found")


def parse_listing(text: str) -> bool:
    """Listed only when the answer says yes and nothing negative."""
    lowered = text.lower()
    return "yes" in lowered and not any(phrase in lowered for phrase in _NEGATIVE_PHRASES)


def source_base_name(source_domain: str) -> str:
    """``g2.com`` -> ``g2``, ``alternativeto.net`` -> ``alternativeto``."""
    return source_domain.replace(".com", "").replace(".net", "")


def find_profile_url(urls: Sequence[str], source_domain: str, domain: str) -> str | None:
    """First URL mentioning both the directory and the domain's first label."""
    base = source_base_name(source_domain).lower()
    label = domain.split(".")[0].lower()
    for url in urls:
        lowered = url.lower()
        if base in lowered and label in lowered:
            return url
    return None


class TrustSourceChecker:
    """Sweep a fixed list of directories one at a time.

    Calls are sequential with a short pause between them so a single shared
    provider is not hammered. A failing source yields a listing with
    ``error`` set and never stops the sweep.

    Args:
        provider: Search-backed provider used to answer presence questions.
        sources: Directory domains to check.
        delay_seconds: Pause between consecutive sources.
    """

    def __init__(
        self,
        provider: CitationChecker,
        sources: Sequence[str] = DEFAULT_PRESENCE_SOURCES,
        delay_seconds: float = 0.2,
    ) -> None:
        self._provider = provider
        self._sources = tuple(sources)
        self._delay = delay_seconds

    @property
    def sources(self) -> tuple[str, ...]:
        return self._sources

    def is_configured(self) -> bool:
        return self._provider.is_configured()

    async def check(self, domain: str) -> list[TrustListing]:
        """Check every configured directory for ``domain``.

        Returns:
            One listing per source, in configured order.
        """
        if not self.is_configured():
            return [
                TrustListing(source_domain=s, is_listed=False, error="API not configured")
                for s in self._sources
            ]

        listings: list[TrustListing] = []
        for i, source in enumerate(self._sources):
            if i > 0 and self._delay > 0:
                await asyncio.sleep(self._delay)
            listings.append(await self._check_source(domain, source))

        listed = sum(1 for entry in listings if entry.is_listed)
        logger.info(f"Trust sweep for {domain}: listed on {listed}/{len(listings)} sources")
        return listings

    async def _check_source(self, domain: str, source: str) -> TrustListing:
        prompt = PRESENCE_PROMPT.format(domain=domain, source=source)
        try:
            answer = await self._provider.answer(prompt, system_prompt=PRESENCE_SYSTEM_PROMPT)
        except httpx.HTTPStatusError as e:
            logger.warning(f"Trust check {source} for {domain} failed: {e.response.status_code}")
            return TrustListing(
                source_domain=source,
                is_listed=False,
                error=f"API error: {e.response.status_code}",
            )
        except Exception as e:
            logger.warning(f"Trust check {source} for {domain} failed. Error: {e}")
            return TrustListing(
                source_domain=source, is_listed=False, error=str(e) or type(e).__name__
            )

        return TrustListing(
            source_domain=source,
            is_listed=parse_listing(answer.text),
            profile_url=find_profile_url(answer.urls, source, domain),
        )
