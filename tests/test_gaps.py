"""Tests for lost-query extraction and opportunity ranking."""

from datetime import UTC, datetime, timedelta

import pytest

from geo_visibility.data import AnalysisRecord, Impact, LostQuery, ProviderResult
from geo_visibility.gaps import (
    GapAnalyzer,
    build_lost_queries,
    calculate_impact,
    merge_recent_analyses,
)

T0 = datetime(2026, 3, 1, tzinfo=UTC)


def _record(*gaps: LostQuery, offset_days: int = 0) -> AnalysisRecord:
    return AnalysisRecord(
        site_id="site-1", created_at=T0 + timedelta(days=offset_days), lost_queries=gaps
    )


class TestBuildLostQueries:
    def test_all_providers_missed(self) -> None:
        results = [
            ProviderResult(
                platform=p,
                query="Best CRM for startups",
                cited=False,
                sources=("https://globex.com/crm", "https://acme.io/x"),
            )
            for p in ("perplexity", "google_aio", "chatgpt")
        ]

        lost = build_lost_queries("acme.io", results)

        assert len(lost) == 1
        assert lost[0].missed_on == ("perplexity", "google_aio", "chatgpt")
        assert lost[0].cited_on == ()
        assert lost[0].buyer_intent == 1.0
        assert lost[0].cited_domains == ("globex.com",)

    def test_unconfigured_and_errored_are_not_misses(self) -> None:
        results = [
            ProviderResult(
                platform="chatgpt",
                query="q1",
                cited=False,
                error="OpenAI API key not configured",
                provider_called=False,
            ),
            ProviderResult(platform="perplexity", query="q2", cited=False, error="API error: 500"),
        ]
        assert build_lost_queries("acme.io", results) == ()

    def test_partial_citation_records_cited_on(self) -> None:
        results = [
            ProviderResult(platform="perplexity", query="Acme pricing", cited=True),
            ProviderResult(platform="chatgpt", query="acme pricing ", cited=False),
        ]

        lost = build_lost_queries("acme.io", results)

        assert len(lost) == 1
        assert lost[0].missed_on == ("chatgpt",)
        assert lost[0].cited_on == ("perplexity",)

    def test_cited_everywhere_is_not_lost(self) -> None:
        results = [ProviderResult(platform="perplexity", query="q", cited=True)]
        assert build_lost_queries("acme.io", results) == ()

    def test_trust_sources_from_miss_sources(self) -> None:
        results = [
            ProviderResult(
                platform="perplexity",
                query="Best CRM",
                cited=False,
                sources=("https://www.g2.com/x", "https://globex.com"),
            )
        ]

        (lost,) = build_lost_queries("acme.io", results)

        assert lost.cited_domains == ("g2.com", "globex.com")
        assert lost.trust_sources == ("g2.com",)


class TestCalculateImpact:
    def test_missed_on_all_three(self) -> None:
        gap = LostQuery(
            query="Best CRM",
            platform="perplexity",
            missed_on=("perplexity", "google_aio", "chatgpt"),
            buyer_intent=0.8,
        )
        impact, reason = calculate_impact(gap)
        assert impact == Impact.HIGH
        assert "missed on all 3 platforms" in reason.lower()

    def test_missed_on_all_even_low_intent(self) -> None:
        gap = LostQuery(query="q", platform="p", missed_on=("a", "b", "c"), buyer_intent=0.2)
        assert calculate_impact(gap)[0] == Impact.HIGH

    def test_high_intent_two_platforms(self) -> None:
        gap = LostQuery(
            query="q",
            platform="p",
            missed_on=("a", "b"),
            buyer_intent=0.9,
            cited_domains=("globex.com",),
        )
        impact, reason = calculate_impact(gap)
        assert impact == Impact.HIGH
        assert "other domains are being cited" in reason

    def test_medium_by_intent(self) -> None:
        gap = LostQuery(query="q", platform="p", missed_on=("a",), buyer_intent=0.5)
        assert calculate_impact(gap) == (
            Impact.MEDIUM,
            "Moderate buyer-intent query with visibility gap",
        )

    def test_medium_by_coverage(self) -> None:
        gap = LostQuery(query="q", platform="p", missed_on=("a", "b"), buyer_intent=0.3)
        assert calculate_impact(gap) == (Impact.MEDIUM, "Missed on 2 platforms")

    def test_low(self) -> None:
        gap = LostQuery(query="q", platform="p", missed_on=("a",), buyer_intent=0.3)
        assert calculate_impact(gap)[0] == Impact.LOW


class TestMergeRecentAnalyses:
    def test_most_recent_occurrence_wins(self) -> None:
        newest = _record(
            LostQuery(query="Best CRM", platform="chatgpt", buyer_intent=1.0), offset_days=2
        )
        older = _record(
            LostQuery(query="  best crm ", platform="perplexity"),
            LostQuery(query="Acme pricing", platform="perplexity"),
            offset_days=1,
        )

        merged = merge_recent_analyses([newest, older])

        assert [g.query for g in merged] == ["Best CRM", "Acme pricing"]
        assert merged[0].platform == "chatgpt"


class TestGapAnalyzer:
    @pytest.fixture
    def analyzer(self) -> GapAnalyzer:
        return GapAnalyzer(history_depth=3)

    def test_sort_order(self, analyzer: GapAnalyzer) -> None:
        record = _record(
            LostQuery(query="low one", platform="p", missed_on=("a",), buyer_intent=0.3),
            LostQuery(query="medium one", platform="p", missed_on=("a",), buyer_intent=0.6),
            LostQuery(query="high addressed", platform="p", missed_on=("a", "b", "c")),
            LostQuery(query="medium two", platform="p", missed_on=("a",), buyer_intent=0.9),
            LostQuery(query="high open", platform="p", missed_on=("a", "b"), buyer_intent=0.8),
        )

        opportunities = analyzer.analyze([record], addressed_queries=["High Addressed"])

        assert [o.query for o in opportunities] == [
            "high open",
            "medium two",
            "medium one",
            "low one",
            "high addressed",
        ]
        assert opportunities[-1].has_page
        assert not opportunities[0].has_page

    def test_deterministic(self, analyzer: GapAnalyzer) -> None:
        record = _record(
            *(
                LostQuery(query=f"q{i}", platform="p", missed_on=("a",), buyer_intent=0.5)
                for i in range(6)
            )
        )
        first = analyzer.analyze([record])
        second = analyzer.analyze([record])
        assert first == second
        assert [o.query for o in first] == [f"q{i}" for i in range(6)]

    def test_history_depth_limits_analyses(self) -> None:
        analyzer = GapAnalyzer(history_depth=2)
        records = [
            _record(LostQuery(query="newest", platform="p"), offset_days=3),
            _record(LostQuery(query="middle", platform="p"), offset_days=2),
            _record(LostQuery(query="oldest", platform="p"), offset_days=1),
        ]

        opportunities = analyzer.analyze(records)

        assert {o.query for o in opportunities} == {"newest", "middle"}

    def test_opportunity_fields(self, analyzer: GapAnalyzer) -> None:
        record = _record(
            LostQuery(
                query="Best CRM",
                platform="perplexity",
                missed_on=("perplexity", "chatgpt"),
                cited_on=("google_aio",),
                buyer_intent=1.0,
                cited_domains=("globex.com",),
                trust_sources=("capterra.com",),
            )
        )

        (opportunity,) = analyzer.analyze([record])

        assert opportunity.missed_platform_count == 2
        assert opportunity.cited_on_platforms == ("google_aio",)
        assert opportunity.cited_domains == ("globex.com",)
        assert opportunity.trust_sources == ("capterra.com",)
        assert opportunity.impact == Impact.HIGH

    def test_empty(self, analyzer: GapAnalyzer) -> None:
        assert analyzer.analyze([]) == []

    def test_invalid_depth(self) -> None:
        with pytest.raises(ValueError):
            GapAnalyzer(history_depth=0)
