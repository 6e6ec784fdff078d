from geo_visibility.trust.presence import TrustSourceChecker, find_profile_url, parse_listing
from geo_visibility.trust.sources import (
    DEFAULT_PRESENCE_SOURCES,
    TRUST_SOURCES,
    TrustSource,
    TrustSourceCategory,
    extract_sources,
    get_trust_source,
    trust_domains,
)

__all__ = [
    "DEFAULT_PRESENCE_SOURCES",
    "TRUST_SOURCES",
    "TrustSource",
    "TrustSourceCategory",
    "TrustSourceChecker",
    "extract_sources",
    "find_profile_url",
    "get_trust_source",
    "parse_listing",
    "trust_domains",
]
