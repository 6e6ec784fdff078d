from geo_visibility.pipeline.dispatcher import (
    CheckEngine,
    assign_all,
    assign_round_robin,
    build_usage,
    visibility_percent,
)
from geo_visibility.pipeline.scheduler import ScheduledChecker, ScheduledSite, SiteSweepSummary

__all__ = [
    "CheckEngine",
    "ScheduledChecker",
    "ScheduledSite",
    "SiteSweepSummary",
    "assign_all",
    "assign_round_robin",
    "build_usage",
    "visibility_percent",
]
