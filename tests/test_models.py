"""Tests for core data models."""

from dataclasses import FrozenInstanceError

import pytest

from geo_visibility.data import (
    APICallUsage,
    CheckCycleResult,
    ConfidenceBand,
    PlanTier,
    ProviderResult,
    TrustListing,
    Usage,
)
from geo_visibility.plans import get_plan_limits


class TestPlanTier:
    def test_resolve_known_values(self) -> None:
        assert PlanTier.resolve("scout") == PlanTier.SCOUT
        assert PlanTier.resolve(" Command ") == PlanTier.COMMAND
        assert PlanTier.resolve(PlanTier.DOMINATE) == PlanTier.DOMINATE

    def test_resolve_unknown_falls_back_to_free(self) -> None:
        assert PlanTier.resolve("enterprise") == PlanTier.FREE
        assert PlanTier.resolve(None) == PlanTier.FREE
        assert PlanTier.resolve("") == PlanTier.FREE

    def test_plan_limits_ascend(self) -> None:
        quotas = [get_plan_limits(t).queries_per_check for t in PlanTier]
        assert quotas == [3, 10, 20, 30]

    def test_remediation_pages(self) -> None:
        assert get_plan_limits("free").remediation_pages_per_scan == 0
        assert get_plan_limits("scout").remediation_pages_per_scan == 2
        assert get_plan_limits("command").remediation_pages_per_scan == 5
        assert get_plan_limits("dominate").remediation_pages_per_scan == 10

    def test_unknown_plan_gets_free_limits(self) -> None:
        assert get_plan_limits("platinum") == get_plan_limits(PlanTier.FREE)
        assert not get_plan_limits("platinum").scheduled_checks


class TestConfidenceBand:
    @pytest.mark.parametrize(
        ("confidence", "band"),
        [
            (0.98, ConfidenceBand.HIGH),
            (0.8, ConfidenceBand.HIGH),
            (0.79, ConfidenceBand.MEDIUM),
            (0.5, ConfidenceBand.MEDIUM),
            (0.49, ConfidenceBand.LOW),
            (0.0, ConfidenceBand.LOW),
        ],
    )
    def test_from_confidence(self, confidence: float, band: ConfidenceBand) -> None:
        assert ConfidenceBand.from_confidence(confidence) == band


class TestProviderResult:
    def test_defaults(self) -> None:
        r = ProviderResult(platform="perplexity", query="q", cited=False)
        assert r.provider_called is True
        assert r.error is None
        assert r.sources == ()
        assert r.is_valid_attempt
        assert r.is_miss

    def test_unconfigured_is_not_a_miss(self) -> None:
        r = ProviderResult(
            platform="chatgpt",
            query="q",
            cited=False,
            error="OpenAI API key not configured",
            provider_called=False,
        )
        assert not r.is_valid_attempt
        assert not r.is_miss

    def test_errored_is_not_a_miss(self) -> None:
        r = ProviderResult(platform="chatgpt", query="q", cited=False, error="API error: 500")
        assert not r.is_miss

    def test_cited_is_not_a_miss(self) -> None:
        r = ProviderResult(platform="chatgpt", query="q", cited=True, confidence=0.5)
        assert not r.is_miss

    def test_is_frozen(self) -> None:
        r = ProviderResult(platform="p", query="q", cited=False)
        with pytest.raises(FrozenInstanceError):
            r.cited = True  # type: ignore[misc]


class TestTrustListing:
    def test_source_name(self) -> None:
        assert TrustListing(source_domain="g2.com", is_listed=True).source_name == "G2"
        assert TrustListing(source_domain="capterra.com", is_listed=False).source_name == "Capterra"
        assert (
            TrustListing(source_domain="alternativeto.net", is_listed=False).source_name
            == "Alternativeto"
        )


class TestUsage:
    def test_empty(self) -> None:
        usage = Usage()
        assert usage.apis_called == 0
        assert usage.failed_calls == 0
        assert usage.calls_by_platform() == {}

    def test_counts(self) -> None:
        usage = Usage(
            api_calls=[
                APICallUsage(platform="perplexity"),
                APICallUsage(platform="perplexity", failed=True),
                APICallUsage(platform="google_aio"),
            ],
            trust_requests=4,
        )
        assert usage.apis_called == 3
        assert usage.failed_calls == 1
        assert usage.calls_by_platform() == {"perplexity": 2, "google_aio": 1}

    def test_add(self) -> None:
        a = Usage(api_calls=[APICallUsage(platform="a")], trust_requests=1)
        b = Usage(api_calls=[APICallUsage(platform="b")], trust_requests=2)
        total = a + b
        assert total.apis_called == 2
        assert total.trust_requests == 3
        assert a.apis_called == 1

    def test_iadd(self) -> None:
        total = Usage()
        total += Usage(api_calls=[APICallUsage(platform="a", failed=True)])
        assert total.apis_called == 1
        assert total.failed_calls == 1


def test_check_cycle_result_defaults() -> None:
    result = CheckCycleResult(
        domain="acme.io", results=[], cited_count=0, apis_called=0, visibility_percent=0
    )
    assert result.opportunities == []
    assert result.running_score is None
    assert result.persistence_errors == []
    assert result.usage.apis_called == 0
