"""GEO Visibility: track whether AI assistants cite a domain, and where they don't."""

from geo_visibility.config import EngineConfig, create_from_config, load_config
from geo_visibility.data import (
    AnalysisRecord,
    APICallUsage,
    CheckCycleResult,
    CheckQuery,
    Citation,
    ConfidenceBand,
    Impact,
    LostQuery,
    Opportunity,
    PlanTier,
    ProviderFamily,
    ProviderResult,
    QuerySource,
    TrustListing,
    Usage,
    VisibilitySnapshot,
)
from geo_visibility.events import (
    CitationsDiscovered,
    EventSink,
    LoggingEventSink,
    QueueEventSink,
    RemediationRequested,
    VisibilityDropDetected,
)
from geo_visibility.gaps import GapAnalyzer
from geo_visibility.pipeline import CheckEngine, ScheduledChecker, ScheduledSite
from geo_visibility.plans import PLAN_LIMITS, PlanLimits, get_plan_limits
from geo_visibility.providers import (
    CitationChecker,
    ClaudeChecker,
    GeminiChecker,
    OpenAIChecker,
    PerplexityChecker,
)
from geo_visibility.query import QueryGenerator, TemplateQueryGenerator, buyer_intent
from geo_visibility.run_logger import RunLogger
from geo_visibility.scoring import ScoreAggregator, score_response
from geo_visibility.store import CheckStore, InMemoryCheckStore
from geo_visibility.trust import TrustSourceChecker, extract_sources

__all__ = [
    "APICallUsage",
    "AnalysisRecord",
    "CheckCycleResult",
    "CheckEngine",
    "CheckQuery",
    "CheckStore",
    "Citation",
    "CitationChecker",
    "CitationsDiscovered",
    "ClaudeChecker",
    "ConfidenceBand",
    "EngineConfig",
    "EventSink",
    "GapAnalyzer",
    "GeminiChecker",
    "Impact",
    "InMemoryCheckStore",
    "LoggingEventSink",
    "LostQuery",
    "OpenAIChecker",
    "Opportunity",
    "PLAN_LIMITS",
    "PerplexityChecker",
    "PlanLimits",
    "PlanTier",
    "ProviderFamily",
    "ProviderResult",
    "QueryGenerator",
    "QuerySource",
    "QueueEventSink",
    "RemediationRequested",
    "RunLogger",
    "ScheduledChecker",
    "ScheduledSite",
    "ScoreAggregator",
    "TemplateQueryGenerator",
    "TrustListing",
    "TrustSourceChecker",
    "Usage",
    "VisibilityDropDetected",
    "VisibilitySnapshot",
    "buyer_intent",
    "create_from_config",
    "extract_sources",
    "get_plan_limits",
    "load_config",
    "score_response",
]
