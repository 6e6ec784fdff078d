"""URL and domain handling utilities."""

import logging
import re
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^https?://")


def extract_domain(url: str) -> str:
    """Extract domain name from URL.

    Args:
        url: The URL to extract the domain from.

    Returns:
        The lowercased host (without 'www.' prefix), or "" if extraction fails.
    """
    try:
        hostname = urlparse(url).hostname or ""
    except ValueError:
        logger.warning(f"Could not get domain from url {url}")
        return ""
    if hostname.startswith("www."):
        hostname = hostname[4:]
    return hostname


def clean_domain(domain: str) -> str:
    """Normalize user input like ``https://www.Acme.io/pricing`` to ``acme.io``."""
    cleaned = domain.strip().lower()
    cleaned = _SCHEME_RE.sub("", cleaned)
    cleaned = cleaned.split("/", 1)[0]
    if cleaned.startswith("www."):
        cleaned = cleaned[4:]
    return cleaned


def host_matches_domain(url: str, domain: str) -> bool:
    """Whether ``url`` points at ``domain`` or one of its subdomains.

    URLs without a parseable host fall back to a substring check.
    """
    domain = domain.lower()
    host = extract_domain(url)
    if not host:
        return domain in url.lower()
    return host == domain or host.endswith("." + domain)


def count_mentions(text: str, domain: str) -> int:
    """Count non-overlapping, case-insensitive occurrences of ``domain`` in ``text``."""
    if not domain:
        return 0
    return text.lower().count(domain.lower())


def first_mention_index(text: str, domain: str) -> int:
    """Index of the first case-insensitive mention of ``domain``, or -1."""
    return text.lower().find(domain.lower())
