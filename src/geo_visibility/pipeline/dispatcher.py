"""Check cycle engine: generate, dispatch, collect, persist, analyze."""

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from geo_visibility.data import (
    AnalysisRecord,
    APICallUsage,
    CheckCycleResult,
    CheckQuery,
    Citation,
    ConfidenceBand,
    LostQuery,
    Opportunity,
    PlanTier,
    ProviderResult,
    QuerySource,
    TrustListing,
    Usage,
    VisibilitySnapshot,
)
from geo_visibility.events import (
    CheckEvent,
    CitationsDiscovered,
    EventSink,
    RemediationRequested,
    VisibilityDropDetected,
)
from geo_visibility.gaps.analyzer import GapAnalyzer, build_lost_queries, normalize_query
from geo_visibility.plans import get_plan_limits
from geo_visibility.providers.base import CitationChecker, failed_result
from geo_visibility.query.base import QueryGenerator
from geo_visibility.query.generator import TemplateQueryGenerator
from geo_visibility.run_logger import RunLogger
from geo_visibility.scoring.aggregator import ScoreAggregator, round_half_up
from geo_visibility.store.base import CheckStore
from geo_visibility.trust.presence import TrustSourceChecker
from geo_visibility.trust.sources import extract_sources
from geo_visibility.url import clean_domain

logger = logging.getLogger(__name__)

DROP_THRESHOLD = 2


def assign_round_robin(
    queries: Sequence[CheckQuery], providers: Sequence[CitationChecker]
) -> list[tuple[CitationChecker, CheckQuery]]:
    """Pair query ``i`` with provider ``i mod k``."""
    if not providers:
        return []
    return [(providers[i % len(providers)], q) for i, q in enumerate(queries)]


def assign_all(
    query: CheckQuery, providers: Sequence[CitationChecker]
) -> list[tuple[CitationChecker, CheckQuery]]:
    """Send one query to every provider."""
    return [(p, query) for p in providers]


def visibility_percent(results: Sequence[ProviderResult]) -> int:
    """Share of error-free results that cited the domain, 0-100."""
    total = sum(1 for r in results if r.error is None)
    if total == 0:
        return 0
    won = sum(1 for r in results if r.cited)
    return round_half_up(won / total * 100)


def _primary_source(snippet: str | None) -> str | None:
    """First domain the answer draws on, if any."""
    if not snippet:
        return None
    sources = extract_sources(snippet)
    return sources[0] if sources else None


def build_usage(results: Sequence[ProviderResult], trust_requests: int = 0) -> Usage:
    """Usage from results. Only calls that were actually attempted count."""
    return Usage(
        api_calls=[
            APICallUsage(platform=r.platform, failed=r.error is not None)
            for r in results
            if r.provider_called
        ],
        trust_requests=trust_requests,
    )


class CheckEngine:
    """Run one check cycle for a domain across a set of providers.

    Flow:
    1. Generate queries (or take a single re-check query)
    2. Dispatch round-robin (sweep) or to every provider (re-check),
       concurrently with the trust-source sweep
    3. Collect counts
    4. Persist citations, snapshot, running score, listings and analysis
    5. Rank opportunities and publish events

    Only the site ID enables persistence; without a store or site ID the
    cycle is computed in memory and nothing is written.

    Args:
        providers: Provider adapters; list order defines round-robin index.
        generator: Query generator (template generator by default).
        trust_checker: Optional trust-source sweep run on full sweeps.
        store: Optional persistence backend.
        aggregator: Running-score aggregator (shared across cycles).
        gap_analyzer: Opportunity ranking.
        event_sink: Optional destination for outbound events.
        run_logger: Optional RunLogger for stage records.
        clock: Returns the current time (UTC).
    """

    def __init__(
        self,
        providers: Sequence[CitationChecker],
        *,
        generator: QueryGenerator | None = None,
        trust_checker: TrustSourceChecker | None = None,
        store: CheckStore | None = None,
        aggregator: ScoreAggregator | None = None,
        gap_analyzer: GapAnalyzer | None = None,
        event_sink: EventSink | None = None,
        run_logger: RunLogger | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._providers = list(providers)
        self._generator = generator or TemplateQueryGenerator(clock=clock)
        self._trust_checker = trust_checker
        self._store = store
        self._aggregator = aggregator or ScoreAggregator()
        self._gap_analyzer = gap_analyzer or GapAnalyzer()
        self._event_sink = event_sink
        self._run_logger = run_logger
        self._clock = clock or (lambda: datetime.now(tz=UTC))

    @property
    def providers(self) -> list[CitationChecker]:
        return list(self._providers)

    async def run_check(
        self,
        domain: str,
        *,
        site_id: str | None = None,
        plan: PlanTier | str = PlanTier.FREE,
        category: str | None = None,
        custom_queries: list[str] | None = None,
        single_query: str | None = None,
    ) -> CheckCycleResult:
        """Execute one check cycle.

        Args:
            domain: Domain to monitor (cleaned before use).
            site_id: Enables persistence and events when set.
            plan: Subscription tier (unknown values resolve to free).
            category: Optional category for template queries.
            custom_queries: User-defined queries.
            single_query: Re-check this one query on every provider instead
                of generating a sweep.

        Returns:
            The cycle result. Provider failures and persistence failures
            are reported inside it, never raised.

        Raises:
            ValueError: If the domain is empty after cleaning.
        """
        domain = clean_domain(domain)
        if not domain:
            raise ValueError("domain must not be empty")
        plan = PlanTier.resolve(plan)
        recheck = bool(single_query and single_query.strip())

        run_id: str | None = None
        if self._run_logger:
            run_id = self._run_logger.start_run(
                "recheck" if recheck else "sweep",
                {
                    "domain": domain,
                    "site_id": site_id,
                    "plan": plan,
                    "category": category,
                    "custom_queries": custom_queries or [],
                    "single_query": single_query,
                },
            )

        try:
            return await self._run_cycle(
                run_id,
                domain,
                site_id=site_id,
                plan=plan,
                category=category,
                custom_queries=custom_queries,
                single_query=single_query,
                recheck=recheck,
            )
        except BaseException:
            # Cancelled or failed cycles leave no log file behind
            if self._run_logger:
                self._run_logger.discard_run(run_id)
            raise

    async def _run_cycle(
        self,
        run_id: str | None,
        domain: str,
        *,
        site_id: str | None,
        plan: PlanTier,
        category: str | None,
        custom_queries: list[str] | None,
        single_query: str | None,
        recheck: bool,
    ) -> CheckCycleResult:
        # Step 1: Queries
        t0 = time.monotonic()
        if recheck:
            queries = [CheckQuery(text=(single_query or "").strip(), source=QuerySource.RECHECK)]
            assignments = assign_all(queries[0], self._providers)
        else:
            queries = self._generator.generate(
                domain, plan=plan, category=category, custom_queries=custom_queries
            )
            assignments = assign_round_robin(queries, self._providers)
        if self._run_logger:
            self._run_logger.log_stage(
                run_id,
                stage="query_generation",
                component="recheck" if recheck else type(self._generator).__name__,
                input_data={"domain": domain, "plan": plan, "category": category},
                output_data=queries,
                usage=None,
                duration_seconds=time.monotonic() - t0,
            )
        if not self._providers:
            logger.warning("No providers configured, nothing to dispatch")

        # Step 2: Dispatch provider calls and trust sweep together
        t0 = time.monotonic()
        results, listings = await self._dispatch(domain, assignments, with_trust=not recheck)
        dispatch_duration = time.monotonic() - t0

        # Step 3: Collect
        trust_requests = (
            len(listings) if self._trust_checker and self._trust_checker.is_configured() else 0
        )
        usage = build_usage(results, trust_requests)
        cited_count = sum(1 for r in results if r.cited)
        apis_called = sum(1 for r in results if r.provider_called)
        if self._run_logger:
            self._run_logger.log_stage(
                run_id,
                stage="dispatch",
                component="round_robin" if not recheck else "all_providers",
                input_data=[{"platform": p.platform, "query": q.text} for p, q in assignments],
                output_data=results,
                usage=usage,
                duration_seconds=dispatch_duration,
            )
            if listings:
                self._run_logger.log_stage(
                    run_id,
                    stage="trust_sweep",
                    component=type(self._trust_checker).__name__,
                    input_data={"domain": domain},
                    output_data=listings,
                    usage=None,
                    duration_seconds=dispatch_duration,
                )

        result = CheckCycleResult(
            domain=domain,
            results=results,
            cited_count=cited_count,
            apis_called=apis_called,
            visibility_percent=visibility_percent(results),
            site_id=site_id,
            trust_listings=listings,
            usage=usage,
        )

        # Step 4: Persist
        lost = build_lost_queries(domain, results)
        now = self._clock()
        current = AnalysisRecord(
            site_id=site_id or "",
            created_at=now,
            lost_queries=lost,
            total_queries=sum(1 for r in results if r.error is None),
            queries_won=cited_count,
        )
        previous: list[AnalysisRecord] = []
        addressed: set[str] = set()
        events: list[CheckEvent] = []

        if site_id and self._store is not None:
            t0 = time.monotonic()
            previous, addressed, events = await self._persist(
                self._store, site_id, result, current, now
            )
            if self._run_logger:
                self._run_logger.log_stage(
                    run_id,
                    stage="persistence",
                    component=type(self._store).__name__,
                    input_data={"site_id": site_id},
                    output_data={
                        "new_citations": result.new_citations,
                        "running_score": result.running_score,
                        "errors": result.persistence_errors,
                    },
                    usage=None,
                    duration_seconds=time.monotonic() - t0,
                )

        # Step 5: Opportunities and events
        t0 = time.monotonic()
        result.opportunities = self._gap_analyzer.analyze([current, *previous], addressed)
        if self._run_logger:
            self._run_logger.log_stage(
                run_id,
                stage="gap_analysis",
                component=type(self._gap_analyzer).__name__,
                input_data={"lost_queries": lost, "history": len(previous)},
                output_data=result.opportunities,
                usage=None,
                duration_seconds=time.monotonic() - t0,
            )

        if site_id:
            remediation = self._remediation_event(site_id, domain, plan, lost, result.opportunities)
            if remediation is not None:
                events.append(remediation)
            await self._publish(events)

        logger.info(
            f"Check {domain}: {cited_count}/{len(results)} cited, "
            f"{apis_called} APIs called, visibility {result.visibility_percent}%"
        )
        if self._run_logger:
            self._run_logger.finish_run(run_id, result)
        return result

    async def _dispatch(
        self,
        domain: str,
        assignments: list[tuple[CitationChecker, CheckQuery]],
        *,
        with_trust: bool,
    ) -> tuple[list[ProviderResult], list[TrustListing]]:
        tasks = [provider.check(domain, query.text) for provider, query in assignments]
        run_trust = with_trust and self._trust_checker is not None
        if run_trust and self._trust_checker is not None:
            tasks.append(self._trust_checker.check(domain))

        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results: list[ProviderResult] = []
        for (provider, query), outcome in zip(assignments, outcomes, strict=False):
            if isinstance(outcome, BaseException):
                logger.warning(f"Error checking {provider.platform}: {str(outcome)}")
                error = str(outcome) or type(outcome).__name__
                results.append(failed_result(provider.platform, query.text, error))
            else:
                results.append(outcome)

        listings: list[TrustListing] = []
        if run_trust:
            trust_outcome = outcomes[-1]
            if isinstance(trust_outcome, BaseException):
                logger.warning(f"Error in trust sweep: {str(trust_outcome)}")
            else:
                listings = trust_outcome
        return results, listings

    async def _persist(
        self,
        store: CheckStore,
        site_id: str,
        result: CheckCycleResult,
        current: AnalysisRecord,
        now: datetime,
    ) -> tuple[list[AnalysisRecord], set[str], list[CheckEvent]]:
        """Write everything for the cycle. Each write fails on its own."""
        events: list[CheckEvent] = []

        # Citations (insert-if-absent on site, platform, query)
        new_citations: list[Citation] = []
        for r in result.results:
            if not (r.cited and r.is_valid_attempt):
                continue
            try:
                if await store.citation_exists(site_id, r.platform, r.query):
                    continue
                citation = Citation(
                    site_id=site_id,
                    platform=r.platform,
                    query=r.query,
                    snippet=r.snippet,
                    confidence_band=ConfidenceBand.from_confidence(r.confidence),
                    discovered_at=now,
                    confidence=r.confidence,
                    source_domain=_primary_source(r.snippet),
                )
                await store.insert_citation(citation)
                new_citations.append(citation)
            except Exception as e:
                self._persistence_failed(result, f"citation {r.platform}/{r.query!r}", e)
        result.new_citations = len(new_citations)
        if new_citations:
            events.append(
                CitationsDiscovered(
                    site_id=site_id, domain=result.domain, citations=tuple(new_citations)
                )
            )

        # Daily snapshot, then drop detection against the previous one
        total = current.total_queries
        if total > 0:
            snapshot = VisibilitySnapshot(
                site_id=site_id,
                snapshot_date=now.date(),
                total_queries_checked=total,
                queries_won=current.queries_won,
                queries_lost=total - current.queries_won,
            )
            try:
                await store.upsert_snapshot(snapshot)
                recent = await store.recent_snapshots(site_id, limit=2)
                dropped = len(recent) == 2 and (
                    recent[1].queries_won - recent[0].queries_won >= DROP_THRESHOLD
                )
                if dropped:
                    events.append(
                        VisibilityDropDetected(
                            site_id=site_id,
                            domain=result.domain,
                            previous_won=recent[1].queries_won,
                            current_won=recent[0].queries_won,
                        )
                    )
            except Exception as e:
                self._persistence_failed(result, "snapshot", e)

        # Running score
        try:
            result.running_score = await self._aggregator.update(store, site_id, result.results)
        except Exception as e:
            self._persistence_failed(result, "running score", e)

        # Trust listings (errored sources are not written)
        for listing in result.trust_listings:
            if listing.error is not None:
                continue
            try:
                await store.upsert_trust_listing(site_id, listing)
            except Exception as e:
                self._persistence_failed(result, f"trust listing {listing.source_domain}", e)

        # History is read before this cycle's analysis is saved
        previous: list[AnalysisRecord] = []
        depth = self._gap_analyzer.history_depth
        if depth > 1:
            try:
                previous = await store.recent_analyses(site_id, limit=depth - 1)
            except Exception as e:
                self._persistence_failed(result, "analysis history", e)
        try:
            await store.save_analysis(current)
        except Exception as e:
            self._persistence_failed(result, "analysis", e)

        addressed: set[str] = set()
        try:
            addressed = await store.addressed_queries(site_id)
        except Exception as e:
            self._persistence_failed(result, "addressed queries", e)

        return previous, addressed, events

    @staticmethod
    def _persistence_failed(result: CheckCycleResult, what: str, error: Exception) -> None:
        logger.exception(f"Failed to persist {what} for site {result.site_id}")
        result.persistence_errors.append(f"{what}: {error}")

    def _remediation_event(
        self,
        site_id: str,
        domain: str,
        plan: PlanTier,
        lost: Sequence[LostQuery],
        opportunities: Sequence[Opportunity],
    ) -> RemediationRequested | None:
        max_pages = get_plan_limits(plan).remediation_pages_per_scan
        if max_pages <= 0 or not lost:
            return None
        rank = {
            normalize_query(o.query): i for i, o in enumerate(opportunities) if not o.has_page
        }
        ranked = sorted(
            (q for q in lost if normalize_query(q.query) in rank),
            key=lambda q: rank[normalize_query(q.query)],
        )
        if not ranked:
            return None
        return RemediationRequested(
            site_id=site_id, domain=domain, lost_queries=tuple(ranked), max_pages=max_pages
        )

    async def _publish(self, events: Sequence[CheckEvent]) -> None:
        if self._event_sink is None:
            return
        for event in events:
            try:
                await self._event_sink.publish(event)
            except Exception as e:
                logger.warning(f"Failed to publish {type(event).__name__}: {e}")
