"""Template-driven query generator."""

import re
from collections.abc import Callable
from datetime import UTC, datetime

from geo_visibility.data import CheckQuery, PlanTier, QuerySource
from geo_visibility.plans import get_plan_limits
from geo_visibility.query.templates import BASE_TEMPLATES, INTENT_TEMPLATES, category_queries
from geo_visibility.url import clean_domain

_TLD_SUFFIX_RE = re.compile(
    r"\.(com|io|co|ai|app|dev|org|net|me|sh|cc|so|biz|xyz|tech|tools|software"
    r"|cloud|pro|gg|fm|tv|to|ly|co\.uk|com\.au)$"
)


def brand_name(domain: str) -> str:
    """Derive a human-readable brand from a domain.

    ``acme.io`` -> ``Acme``, ``app.notion.so`` -> ``Notion``.
    """
    stripped = _TLD_SUFFIX_RE.sub("", domain)
    name = stripped.split(".")[-1] or domain.split(".")[0]
    return name[:1].upper() + name[1:]


class TemplateQueryGenerator:
    """Build a bounded, deduplicated query list from four template layers.

    Layers, in priority order:

    1. User custom queries (capped per tier).
    2. Three fixed "what/who is this site" base queries.
    3. Category templates (empty when the category is unknown).
    4. Generic buyer-intent templates parameterized by brand and year.

    The concatenation is deduplicated keeping first occurrences and then
    truncated to the tier quota, so a small quota keeps only the highest
    priority layers.

    Args:
        clock: Returns the current time; only the year is used.
    """

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(tz=UTC))

    def generate(
        self,
        domain: str,
        *,
        plan: PlanTier,
        category: str | None = None,
        custom_queries: list[str] | None = None,
    ) -> list[CheckQuery]:
        """Generate the check queries for a domain.

        Args:
            domain: Domain to check (cleaned before use).
            plan: Subscription tier deciding quota and custom cap.
            category: Optional topical category for template lookup.
            custom_queries: User-defined queries, highest priority.

        Returns:
            At most ``queries_per_check`` queries for the plan.
        """
        limits = get_plan_limits(plan)
        domain = clean_domain(domain)
        brand = brand_name(domain)
        year = self._clock().year

        customs = [q.strip() for q in (custom_queries or []) if q and q.strip()]
        layers: list[tuple[QuerySource, list[str]]] = [
            (QuerySource.CUSTOM, customs[: limits.custom_query_cap]),
            (QuerySource.BASE, [t.format(brand=brand, domain=domain) for t in BASE_TEMPLATES]),
            (QuerySource.CATEGORY, category_queries(category)),
            (
                QuerySource.INTENT,
                [t.format(brand=brand, domain=domain, year=year) for t in INTENT_TEMPLATES],
            ),
        ]

        seen: set[str] = set()
        queries: list[CheckQuery] = []
        for source, texts in layers:
            for text in texts:
                if len(queries) >= limits.queries_per_check:
                    return queries
                if text in seen:
                    continue
                seen.add(text)
                queries.append(CheckQuery(text=text, source=source, rank=len(queries)))
        return queries
