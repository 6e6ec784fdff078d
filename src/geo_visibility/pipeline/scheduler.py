"""Periodic sweeps over every paid site."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from geo_visibility.data import PlanTier, Usage
from geo_visibility.pipeline.dispatcher import CheckEngine
from geo_visibility.plans import get_plan_limits

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduledSite:
    """A site enrolled in scheduled checks."""

    site_id: str
    domain: str
    plan: PlanTier = PlanTier.FREE
    category: str | None = None
    custom_queries: tuple[str, ...] = ()


@dataclass
class SiteSweepSummary:
    """Outcome of one site within a scheduled sweep."""

    site_id: str
    domain: str
    skipped: bool = False
    cited_count: int = 0
    apis_called: int = 0
    visibility_percent: int = 0
    running_score: int | None = None
    error: str | None = None
    persistence_errors: list[str] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)


class ScheduledChecker:
    """Run the engine for each site, one after another.

    Sites run sequentially to stay polite with shared provider quotas.
    Free-tier sites are skipped. A failing site is logged and recorded in
    its summary; the sweep continues.

    ``total_usage`` accumulates provider usage over every sweep this
    checker has run.

    Args:
        engine: Engine used for every site.
    """

    def __init__(self, engine: CheckEngine) -> None:
        self._engine = engine
        self.total_usage = Usage()

    async def run(self, sites: Iterable[ScheduledSite]) -> list[SiteSweepSummary]:
        summaries: list[SiteSweepSummary] = []
        for site in sites:
            plan = PlanTier.resolve(site.plan)
            if not get_plan_limits(plan).scheduled_checks:
                logger.info(f"Skipping {site.domain} ({plan} plan has no scheduled checks)")
                summaries.append(
                    SiteSweepSummary(site_id=site.site_id, domain=site.domain, skipped=True)
                )
                continue

            try:
                result = await self._engine.run_check(
                    site.domain,
                    site_id=site.site_id,
                    plan=plan,
                    category=site.category,
                    custom_queries=list(site.custom_queries),
                )
            except Exception as e:
                logger.error(f"Scheduled check failed for {site.domain}: {e}")
                summaries.append(
                    SiteSweepSummary(site_id=site.site_id, domain=site.domain, error=str(e))
                )
                continue

            summaries.append(
                SiteSweepSummary(
                    site_id=site.site_id,
                    domain=site.domain,
                    cited_count=result.cited_count,
                    apis_called=result.apis_called,
                    visibility_percent=result.visibility_percent,
                    running_score=result.running_score,
                    persistence_errors=list(result.persistence_errors),
                    usage=result.usage,
                )
            )
            self.total_usage += result.usage

        checked = sum(1 for s in summaries if not s.skipped and s.error is None)
        sweep_usage = sum((s.usage for s in summaries), Usage())
        logger.info(
            f"Scheduled sweep finished: {checked}/{len(summaries)} sites checked, "
            f"{sweep_usage.apis_called} APIs called ({sweep_usage.failed_calls} failed), "
            f"{sweep_usage.trust_requests} trust requests"
        )
        return summaries
