"""Data models for the citation engine."""

from geo_visibility.data.models import (
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

__all__ = [
    "APICallUsage",
    "AnalysisRecord",
    "CheckCycleResult",
    "CheckQuery",
    "Citation",
    "ConfidenceBand",
    "Impact",
    "LostQuery",
    "Opportunity",
    "PlanTier",
    "ProviderFamily",
    "ProviderResult",
    "QuerySource",
    "TrustListing",
    "Usage",
    "VisibilitySnapshot",
]
