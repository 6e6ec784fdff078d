"""Per-tier limits that shape a check cycle."""

from dataclasses import dataclass

from geo_visibility.data import PlanTier


@dataclass(frozen=True)
class PlanLimits:
    """Limits applied to one subscription tier.

    Args:
        queries_per_check: Upper bound on generated queries per full sweep.
        custom_query_cap: How many user-supplied queries are considered.
        remediation_pages_per_scan: Fix pages requested after each sweep.
        scheduled_checks: Whether the tier is included in scheduled sweeps.
    """

    queries_per_check: int
    custom_query_cap: int
    remediation_pages_per_scan: int
    scheduled_checks: bool


PLAN_LIMITS: dict[PlanTier, PlanLimits] = {
    PlanTier.FREE: PlanLimits(3, 5, 0, False),
    PlanTier.SCOUT: PlanLimits(10, 5, 2, True),
    PlanTier.COMMAND: PlanLimits(20, 100, 5, True),
    PlanTier.DOMINATE: PlanLimits(30, 100, 10, True),
}


def get_plan_limits(plan: PlanTier | str | None) -> PlanLimits:
    """Look up limits for a plan, treating unknown plans as free."""
    return PLAN_LIMITS[PlanTier.resolve(plan)]
