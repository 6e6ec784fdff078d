"""Tests for the trust-source catalogue and presence sweep."""

from collections.abc import Callable
from unittest.mock import AsyncMock

import httpx
import pytest

from geo_visibility.providers.base import ProviderAnswer
from geo_visibility.trust import (
    TrustSourceChecker,
    extract_sources,
    find_profile_url,
    get_trust_source,
    parse_listing,
    trust_domains,
)
from geo_visibility.trust.sources import TrustSourceCategory


class TestParseListing:
    def test_yes(self) -> None:
        assert parse_listing("Yes, Acme has a profile at g2.com/products/acme.")

    def test_yes_with_negative_phrase(self) -> None:
        assert not parse_listing("Yes... actually it is not listed.")

    def test_plain_negative(self) -> None:
        assert not parse_listing("No.")

    def test_no_substring_blocks_listing(self) -> None:
        # "no" anywhere, including inside other words, counts as negative
        assert not parse_listing("Yes, I know of it.")

    def test_without_yes(self) -> None:
        assert not parse_listing("It has a page there.")


class TestFindProfileUrl:
    def test_first_matching_url(self) -> None:
        urls = [
            "https://acme.io/about",
            "https://www.g2.com/products/acme/reviews",
            "https://www.g2.com/products/acme",
        ]
        assert find_profile_url(urls, "g2.com", "acme.io") == urls[1]

    def test_requires_both_names(self) -> None:
        urls = ["https://www.g2.com/products/globex", "https://acme.io"]
        assert find_profile_url(urls, "g2.com", "acme.io") is None


class TestCatalogue:
    def test_lookup(self) -> None:
        source = get_trust_source("www.g2.com")
        assert source is not None
        assert source.name == "G2"
        assert source.category == TrustSourceCategory.REVIEW

    def test_lookup_subdomain(self) -> None:
        source = get_trust_source("old.reddit.com")
        assert source is not None
        assert source.name == "Reddit"

    def test_unknown(self) -> None:
        assert get_trust_source("example.org") is None

    def test_extract_sources(self) -> None:
        text = (
            "See https://www.capterra.com/p/1 and reviews on G2. "
            "According to techradar.com it is solid."
        )
        assert extract_sources(text) == ["capterra.com", "techradar.com", "g2.com"]

    def test_trust_domains(self) -> None:
        domains = ["old.reddit.com", "example.org", "g2.com", "reddit.com"]
        assert trust_domains(domains) == ["reddit.com", "g2.com"]


class TestTrustSourceChecker:
    async def test_unconfigured_returns_errors_without_calls(
        self, make_checker: Callable
    ) -> None:
        provider = make_checker("perplexity", configured=False)
        checker = TrustSourceChecker(provider, sources=["g2.com", "capterra.com"])

        listings = await checker.check("acme.io")

        assert [entry.source_domain for entry in listings] == ["g2.com", "capterra.com"]
        assert all(entry.error == "API not configured" for entry in listings)
        assert provider.prompts == []

    async def test_sequential_sweep(self, make_checker: Callable) -> None:
        provider = make_checker(
            "perplexity",
            answer_text="Yes. Profile: https://g2.com/products/acme",
            answer_urls=("https://www.g2.com/products/acme",),
        )
        checker = TrustSourceChecker(provider, sources=["g2.com", "capterra.com"], delay_seconds=0)

        listings = await checker.check("acme.io")

        assert provider.prompts == [
            "Is acme.io listed on g2.com? If yes, what's the profile URL?",
            "Is acme.io listed on capterra.com? If yes, what's the profile URL?",
        ]
        assert listings[0].is_listed
        assert listings[0].profile_url == "https://www.g2.com/products/acme"
        assert listings[1].is_listed
        assert listings[1].profile_url is None

    async def test_failure_is_isolated(self, make_checker: Callable) -> None:
        provider = make_checker("perplexity", answer_text="Yes, listed.")
        request = httpx.Request("POST", "https://api.perplexity.ai/chat/completions")
        provider.answer = AsyncMock(
            side_effect=[
                httpx.HTTPStatusError(
                    "boom", request=request, response=httpx.Response(500, request=request)
                ),
                ProviderAnswer(text="Yes, listed."),
                RuntimeError("unexpected"),
            ]
        )
        checker = TrustSourceChecker(
            provider, sources=["g2.com", "capterra.com", "trustpilot.com"], delay_seconds=0
        )

        listings = await checker.check("acme.io")

        assert len(listings) == 3
        assert listings[0].error == "API error: 500"
        assert listings[1].error is None
        assert listings[1].is_listed
        assert listings[2].error == "unexpected"

    async def test_delay_between_sources(
        self, make_checker: Callable, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        sleeps: list[float] = []

        async def fake_sleep(seconds: float) -> None:
            sleeps.append(seconds)

        monkeypatch.setattr("geo_visibility.trust.presence.asyncio.sleep", fake_sleep)
        provider = make_checker("perplexity", answer_text="No.")
        checker = TrustSourceChecker(provider, sources=["a.com", "b.com", "c.com"])

        await checker.check("acme.io")

        assert sleeps == [0.2, 0.2]
