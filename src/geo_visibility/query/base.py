from typing import Protocol

from geo_visibility.data import CheckQuery, PlanTier


class QueryGenerator(Protocol):
    """Interface for building the query set of a check cycle."""

    def generate(
        self,
        domain: str,
        *,
        plan: PlanTier,
        category: str | None = None,
        custom_queries: list[str] | None = None,
    ) -> list[CheckQuery]: ...
