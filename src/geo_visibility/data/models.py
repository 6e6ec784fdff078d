"""Core data models for the citation engine."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum


class PlanTier(StrEnum):
    """Subscription tiers, ascending by query quota."""

    FREE = "free"
    SCOUT = "scout"
    COMMAND = "command"
    DOMINATE = "dominate"

    @classmethod
    def resolve(cls, value: "str | PlanTier | None") -> "PlanTier":
        """Map a stored plan string to a tier, falling back to FREE."""
        if isinstance(value, PlanTier):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.FREE


class QuerySource(StrEnum):
    """Which generation layer produced a query."""

    CUSTOM = "custom"
    BASE = "base"
    CATEGORY = "category"
    INTENT = "intent"
    RECHECK = "recheck"


class ProviderFamily(StrEnum):
    """Evidence model a provider's responses are scored with.

    - ``citation_link``: provider returns explicit source URLs.
    - ``grounded``: provider returns retrieval grounding chunks.
    - ``knowledge_only``: unaided model recall, no live retrieval.
    """

    CITATION_LINK = "citation_link"
    GROUNDED = "grounded"
    KNOWLEDGE_ONLY = "knowledge_only"


class ConfidenceBand(StrEnum):
    """Coarse confidence label stored on citation rows."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_confidence(cls, confidence: float) -> "ConfidenceBand":
        if confidence >= 0.8:
            return cls.HIGH
        if confidence >= 0.5:
            return cls.MEDIUM
        return cls.LOW


class Impact(StrEnum):
    """Priority tier of a visibility gap."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class CheckQuery:
    """A natural-language buyer question to ask the providers."""

    text: str
    source: QuerySource
    rank: int = 0


@dataclass(frozen=True)
class ProviderResult:
    """Outcome of asking one provider one query.

    ``provider_called`` is False only when the provider was never invoked
    (missing credentials). Such results are never negative signals.
    ``sources`` holds the evidence URLs the provider returned, if any.
    """

    platform: str
    query: str
    cited: bool
    confidence: float = 0.0
    snippet: str | None = None
    error: str | None = None
    provider_called: bool = True
    sources: tuple[str, ...] = ()

    @property
    def is_valid_attempt(self) -> bool:
        """Whether the provider was called and answered without error."""
        return self.provider_called and self.error is None

    @property
    def is_miss(self) -> bool:
        """Whether this result is genuine evidence that the domain was not cited."""
        return self.is_valid_attempt and not self.cited


@dataclass(frozen=True)
class TrustListing:
    """Whether a domain is listed on one third-party directory."""

    source_domain: str
    is_listed: bool
    profile_url: str | None = None
    error: str | None = None

    @property
    def source_name(self) -> str:
        """Display name derived from the directory domain (``g2.com`` -> ``G2``)."""
        base = self.source_domain.replace(".com", "").replace(".net", "")
        return base[:1].upper() + base[1:]


@dataclass(frozen=True)
class Citation:
    """Durable record that a provider cited the monitored domain."""

    site_id: str
    platform: str
    query: str
    snippet: str | None
    confidence_band: ConfidenceBand
    discovered_at: datetime
    confidence: float = 0.0
    source_domain: str | None = None


@dataclass(frozen=True)
class VisibilitySnapshot:
    """Per-site, per-day visibility counts."""

    site_id: str
    snapshot_date: date
    total_queries_checked: int
    queries_won: int
    queries_lost: int


@dataclass(frozen=True)
class LostQuery:
    """A query the domain was not cited for during one check cycle."""

    query: str
    platform: str
    missed_on: tuple[str, ...] = ()
    cited_on: tuple[str, ...] = ()
    buyer_intent: float = 0.5
    cited_domains: tuple[str, ...] = ()
    trust_sources: tuple[str, ...] = ()


@dataclass(frozen=True)
class AnalysisRecord:
    """Persisted summary of one check cycle, read back by gap analysis."""

    site_id: str
    created_at: datetime
    lost_queries: tuple[LostQuery, ...] = ()
    total_queries: int = 0
    queries_won: int = 0


@dataclass(frozen=True)
class Opportunity:
    """A deduplicated, impact-ranked visibility gap."""

    query: str
    platform: str
    impact: Impact
    impact_reason: str
    has_page: bool = False
    missed_platform_count: int = 1
    cited_on_platforms: tuple[str, ...] = ()
    cited_domains: tuple[str, ...] = ()
    buyer_intent: float = 0.5
    trust_sources: tuple[str, ...] = ()


@dataclass(frozen=True)
class APICallUsage:
    """One attempted provider call."""

    platform: str
    failed: bool = False


@dataclass
class Usage:
    """Accumulated provider usage across a check cycle."""

    api_calls: list[APICallUsage] = field(default_factory=list)
    trust_requests: int = 0

    @property
    def apis_called(self) -> int:
        return len(self.api_calls)

    @property
    def failed_calls(self) -> int:
        return sum(1 for c in self.api_calls if c.failed)

    def calls_by_platform(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for call in self.api_calls:
            counts[call.platform] = counts.get(call.platform, 0) + 1
        return counts

    def __add__(self, other: "Usage") -> "Usage":
        return Usage(
            api_calls=self.api_calls + other.api_calls,
            trust_requests=self.trust_requests + other.trust_requests,
        )

    def __iadd__(self, other: "Usage") -> "Usage":
        self.api_calls.extend(other.api_calls)
        self.trust_requests += other.trust_requests
        return self


@dataclass
class CheckCycleResult:
    """Everything one check cycle produced.

    ``running_score`` is None when no valid attempt contributed a score
    (no site, or every provider unconfigured or failing).
    """

    domain: str
    results: list[ProviderResult]
    cited_count: int
    apis_called: int
    visibility_percent: int
    opportunities: list[Opportunity] = field(default_factory=list)
    site_id: str | None = None
    trust_listings: list[TrustListing] = field(default_factory=list)
    running_score: int | None = None
    new_citations: int = 0
    usage: Usage = field(default_factory=Usage)
    persistence_errors: list[str] = field(default_factory=list)
