"""Catalogue of third-party sites AI assistants lean on for recommendations."""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum


class TrustSourceCategory(StrEnum):
    REVIEW = "review"
    DIRECTORY = "directory"
    COMMUNITY = "community"
    MEDIA = "media"
    COMPARISON = "comparison"


@dataclass(frozen=True)
class TrustSource:
    """A third-party site and how much assistants trust it (1-10)."""

    domain: str
    name: str
    category: TrustSourceCategory
    trust_score: int


TRUST_SOURCES: tuple[TrustSource, ...] = (
    TrustSource("g2.com", "G2", TrustSourceCategory.REVIEW, 10),
    TrustSource("capterra.com", "Capterra", TrustSourceCategory.REVIEW, 9),
    TrustSource("trustradius.com", "TrustRadius", TrustSourceCategory.REVIEW, 8),
    TrustSource("trustpilot.com", "Trustpilot", TrustSourceCategory.REVIEW, 8),
    TrustSource("getapp.com", "GetApp", TrustSourceCategory.REVIEW, 7),
    TrustSource("softwareadvice.com", "Software Advice", TrustSourceCategory.REVIEW, 7),
    TrustSource("producthunt.com", "Product Hunt", TrustSourceCategory.DIRECTORY, 9),
    TrustSource("alternativeto.net", "AlternativeTo", TrustSourceCategory.DIRECTORY, 8),
    TrustSource("saashub.com", "SaaSHub", TrustSourceCategory.DIRECTORY, 6),
    TrustSource("reddit.com", "Reddit", TrustSourceCategory.COMMUNITY, 8),
    TrustSource("news.ycombinator.com", "Hacker News", TrustSourceCategory.COMMUNITY, 8),
    TrustSource("indiehackers.com", "Indie Hackers", TrustSourceCategory.COMMUNITY, 7),
    TrustSource("techcrunch.com", "TechCrunch", TrustSourceCategory.MEDIA, 9),
    TrustSource("forbes.com", "Forbes", TrustSourceCategory.MEDIA, 9),
    TrustSource("pcmag.com", "PCMag", TrustSourceCategory.MEDIA, 8),
    TrustSource("techradar.com", "TechRadar", TrustSourceCategory.MEDIA, 8),
    TrustSource("zapier.com", "Zapier Blog", TrustSourceCategory.COMPARISON, 9),
    TrustSource("versus.com", "Versus", TrustSourceCategory.COMPARISON, 6),
    TrustSource("slant.co", "Slant", TrustSourceCategory.COMPARISON, 6),
)

DEFAULT_PRESENCE_SOURCES: tuple[str, ...] = (
    "g2.com",
    "capterra.com",
    "producthunt.com",
    "trustpilot.com",
)

_SOURCE_MAP: dict[str, TrustSource] = {s.domain: s for s in TRUST_SOURCES}

_URL_HOST_RE = re.compile(r"https?://([a-zA-Z0-9.-]+)")
_ATTRIBUTION_RES = (
    re.compile(r"sources?:\s*([a-zA-Z0-9.-]+\.(?:com|org|net|io|co))", re.IGNORECASE),
    re.compile(r"according to\s+([a-zA-Z0-9.-]+\.(?:com|org|net|io|co))", re.IGNORECASE),
    re.compile(r"cited by\s+([a-zA-Z0-9.-]+\.(?:com|org|net|io|co))", re.IGNORECASE),
)


def _strip_www(host: str) -> str:
    host = host.lower()
    return host[4:] if host.startswith("www.") else host


def extract_sources(text: str) -> list[str]:
    """Find the domains an answer draws on.

    Collects hosts of URLs in the text, domains named in attribution
    phrases ("Source: x.com", "according to x.com"), and catalogue entries
    mentioned by display name. Order of first appearance is preserved.
    """
    found: dict[str, None] = {}
    for match in _URL_HOST_RE.finditer(text):
        found[_strip_www(match.group(1))] = None
    for pattern in _ATTRIBUTION_RES:
        for match in pattern.finditer(text):
            found[_strip_www(match.group(1))] = None
    lowered = text.lower()
    for source in TRUST_SOURCES:
        if source.name.lower() in lowered:
            found[source.domain] = None
    return list(found)


def get_trust_source(domain: str) -> TrustSource | None:
    """Look up a catalogue entry by domain, ignoring subdomains."""
    domain = _strip_www(domain)
    if domain in _SOURCE_MAP:
        return _SOURCE_MAP[domain]
    parts = domain.split(".")
    if len(parts) > 2:
        return _SOURCE_MAP.get(".".join(parts[-2:]))
    return None


def trust_domains(domains: Iterable[str]) -> list[str]:
    """Catalogue domains among ``domains``, deduplicated in order."""
    found: dict[str, None] = {}
    for domain in domains:
        source = get_trust_source(domain)
        if source is not None:
            found[source.domain] = None
    return list(found)
