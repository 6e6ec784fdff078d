from geo_visibility.gaps.analyzer import (
    GapAnalyzer,
    build_lost_queries,
    calculate_impact,
    merge_recent_analyses,
)

__all__ = ["GapAnalyzer", "build_lost_queries", "calculate_impact", "merge_recent_analyses"]
