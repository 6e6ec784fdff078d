"""Turn lost queries into impact-ranked opportunities.

Impact is driven by real signals from the check cycles:

- buyer intent of the query (buying queries matter most)
- how many platforms missed the domain (all of them is critical)
- whether other domains were cited instead
"""

import logging
from collections.abc import Iterable, Sequence

from geo_visibility.data import AnalysisRecord, Impact, LostQuery, Opportunity, ProviderResult
from geo_visibility.query.intent import buyer_intent
from geo_visibility.trust.sources import trust_domains
from geo_visibility.url import extract_domain, host_matches_domain

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_DEPTH = 3
ALL_PLATFORMS_THRESHOLD = 3

_IMPACT_ORDER = {Impact.HIGH: 0, Impact.MEDIUM: 1, Impact.LOW: 2}


def normalize_query(query: str) -> str:
    return query.strip().lower()


def build_lost_queries(domain: str, results: Sequence[ProviderResult]) -> tuple[LostQuery, ...]:
    """Group one cycle's results by query and keep those with a genuine miss.

    Unconfigured and errored results are never counted as misses.

    Args:
        domain: The monitored domain, excluded from ``cited_domains``.
        results: Every provider result from the cycle.

    Returns:
        One entry per lost query, in first-seen order.
    """
    grouped: dict[str, list[ProviderResult]] = {}
    for result in results:
        grouped.setdefault(normalize_query(result.query), []).append(result)

    lost: list[LostQuery] = []
    for group in grouped.values():
        misses = [r for r in group if r.is_miss]
        if not misses:
            continue
        cited_domains: dict[str, None] = {}
        for miss in misses:
            for url in miss.sources:
                host = extract_domain(url)
                if host and not host_matches_domain(url, domain):
                    cited_domains[host] = None
        lost.append(
            LostQuery(
                query=misses[0].query,
                platform=misses[0].platform,
                missed_on=tuple(dict.fromkeys(r.platform for r in misses)),
                cited_on=tuple(dict.fromkeys(r.platform for r in group if r.cited)),
                buyer_intent=buyer_intent(misses[0].query),
                cited_domains=tuple(cited_domains),
                trust_sources=tuple(trust_domains(cited_domains)),
            )
        )
    return tuple(lost)


def merge_recent_analyses(analyses: Iterable[AnalysisRecord]) -> list[LostQuery]:
    """Merge lost queries across analyses ordered newest first.

    Queries are deduplicated on trimmed, lowercased text; the most recent
    occurrence wins.
    """
    seen: set[str] = set()
    merged: list[LostQuery] = []
    for analysis in analyses:
        for gap in analysis.lost_queries:
            key = normalize_query(gap.query)
            if key and key not in seen:
                seen.add(key)
                merged.append(gap)
    return merged


def calculate_impact(gap: LostQuery) -> tuple[Impact, str]:
    """Classify a lost query and explain why."""
    intent = gap.buyer_intent
    missed = max(1, len(gap.missed_on))

    if missed >= ALL_PLATFORMS_THRESHOLD:
        if gap.cited_on:
            return Impact.HIGH, f"Missed on {missed} platforms"
        return Impact.HIGH, f"Missed on all {missed} platforms"

    if intent >= 0.7 and missed >= 2:
        reason = f"High-intent query, missed on {missed} platforms"
        if gap.cited_domains:
            reason += ", other domains are being cited"
        return Impact.HIGH, reason

    if intent >= 0.5 or missed >= 2:
        if missed >= 2:
            return Impact.MEDIUM, f"Missed on {missed} platforms"
        return Impact.MEDIUM, "Moderate buyer-intent query with visibility gap"

    return Impact.LOW, "Lower-intent query with partial coverage"


def _sort_key(opportunity: Opportunity) -> tuple[bool, int, float]:
    return (
        opportunity.has_page,
        _IMPACT_ORDER[opportunity.impact],
        -opportunity.buyer_intent,
    )


class GapAnalyzer:
    """Rank the visibility gaps of a site's recent check cycles.

    Args:
        history_depth: How many recent analyses to merge.
    """

    def __init__(self, history_depth: int = DEFAULT_HISTORY_DEPTH) -> None:
        if history_depth < 1:
            raise ValueError(f"history_depth must be >= 1, got {history_depth}")
        self.history_depth = history_depth

    def analyze(
        self,
        analyses: Sequence[AnalysisRecord],
        addressed_queries: Iterable[str] = (),
    ) -> list[Opportunity]:
        """Build the ranked opportunity list.

        Args:
            analyses: Recent analyses, newest first. Only the first
                ``history_depth`` are used.
            addressed_queries: Queries that already have a remediation page.

        Returns:
            Unaddressed gaps first, then by impact tier, then by descending
            buyer intent. Ties keep merge order, so output is reproducible.
        """
        addressed = {normalize_query(q) for q in addressed_queries}
        gaps = merge_recent_analyses(analyses[: self.history_depth])

        opportunities: list[Opportunity] = []
        for gap in gaps:
            impact, reason = calculate_impact(gap)
            opportunities.append(
                Opportunity(
                    query=gap.query,
                    platform=gap.platform,
                    impact=impact,
                    impact_reason=reason,
                    has_page=normalize_query(gap.query) in addressed,
                    missed_platform_count=max(1, len(gap.missed_on)),
                    cited_on_platforms=gap.cited_on,
                    cited_domains=gap.cited_domains,
                    buyer_intent=gap.buyer_intent,
                    trust_sources=gap.trust_sources,
                )
            )
        opportunities.sort(key=_sort_key)
        logger.info(
            f"Gap analysis: {len(opportunities)} opportunities from {len(gaps)} merged gaps"
        )
        return opportunities
