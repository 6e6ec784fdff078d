from geo_visibility.scoring.aggregator import (
    ScoreAggregator,
    blend_score,
    compute_new_score,
    round_half_up,
)
from geo_visibility.scoring.confidence import (
    UNKNOWN_PHRASES,
    Verdict,
    score_citation_links,
    score_grounded,
    score_knowledge_only,
    score_response,
)

__all__ = [
    "ScoreAggregator",
    "UNKNOWN_PHRASES",
    "Verdict",
    "blend_score",
    "compute_new_score",
    "round_half_up",
    "score_citation_links",
    "score_grounded",
    "score_knowledge_only",
    "score_response",
]
