"""Per-family evidence models that turn a provider answer into a verdict.

Each provider family produces structurally different evidence, so each has
its own pure scoring function:

- ``citation_link``: explicit source URLs. A link on the domain is the
  strongest signal; body mentions alone score lower.
- ``grounded``: retrieval grounding chunks. Same two tiers as citation
  links with slightly lower constants.
- ``knowledge_only``: unaided recall. The domain must be mentioned and the
  answer must not be a refusal; confidence stays well below grounded
  evidence for the same mention frequency.

All confidences are rounded to two decimals.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from geo_visibility.data import ProviderFamily
from geo_visibility.url import count_mentions, first_mention_index, host_matches_domain

UNKNOWN_PHRASES: tuple[str, ...] = (
    "i don't have information",
    "i'm not familiar",
    "i don't know",
    "i couldn't find",
    "no information available",
    "not aware of",
)


@dataclass(frozen=True)
class Verdict:
    """Cited decision plus graded confidence in [0, 1]."""

    cited: bool
    confidence: float


NOT_CITED = Verdict(cited=False, confidence=0.0)


def count_matching_links(domain: str, urls: Sequence[str]) -> int:
    """Number of URLs whose host is ``domain`` or a subdomain of it."""
    return sum(1 for url in urls if host_matches_domain(url, domain))


def _link_tier(
    domain: str,
    text: str,
    urls: Sequence[str],
    *,
    link_base: float,
    link_step: float,
    link_cap: float,
    body_bonus_cap: float,
    mention_base: float,
    mention_step: float,
    mention_cap: float,
    early_window: int | None,
) -> Verdict:
    matches = count_matching_links(domain, urls)
    mentions = count_mentions(text, domain)
    if matches:
        confidence = min(link_cap, link_base + link_step * (matches - 1))
        if mentions:
            confidence = min(body_bonus_cap, confidence + 0.02)
        return Verdict(cited=True, confidence=round(confidence, 2))
    if mentions:
        confidence = mention_base + min(mention_cap, mentions * mention_step)
        if early_window is not None and first_mention_index(text, domain) < early_window:
            confidence += 0.03
        return Verdict(cited=True, confidence=round(confidence, 2))
    return NOT_CITED


def score_citation_links(domain: str, text: str, urls: Sequence[str]) -> Verdict:
    """Score a provider that returns explicit citation URLs.

    Link match: 0.88, +0.03 per additional matching link (cap 0.97), +0.02
    when the body also mentions the domain (cap 0.98). Body only: 0.62 +
    0.04 per mention (contribution cap 0.14), +0.03 if the first mention
    falls within the first 500 characters.
    """
    return _link_tier(
        domain,
        text,
        urls,
        link_base=0.88,
        link_step=0.03,
        link_cap=0.97,
        body_bonus_cap=0.98,
        mention_base=0.62,
        mention_step=0.04,
        mention_cap=0.14,
        early_window=500,
    )


def score_grounded(domain: str, text: str, urls: Sequence[str]) -> Verdict:
    """Score a provider that returns retrieval grounding chunks.

    Grounded match: 0.82, +0.04 per additional chunk (cap 0.95), +0.02 for a
    body mention (cap 0.97). Body only: 0.58 + 0.05 per mention (cap 0.75).
    """
    return _link_tier(
        domain,
        text,
        urls,
        link_base=0.82,
        link_step=0.04,
        link_cap=0.95,
        body_bonus_cap=0.97,
        mention_base=0.58,
        mention_step=0.05,
        mention_cap=0.17,
        early_window=None,
    )


def is_unknown_answer(text: str) -> bool:
    """Whether the answer admits the model does not know the subject."""
    lowered = text.lower()
    return any(phrase in lowered for phrase in UNKNOWN_PHRASES)


def score_knowledge_only(domain: str, text: str, urls: Sequence[str] = ()) -> Verdict:
    """Score a recall-only provider; ``urls`` is ignored.

    Cited only if the domain is mentioned and no refusal phrase appears.
    Confidence: 0.42 + 0.06 per mention (contribution cap 0.22), +0.04 if
    first mentioned within 300 characters, +0.03 for 3+ mentions.
    """
    mentions = count_mentions(text, domain)
    if not mentions or is_unknown_answer(text):
        return NOT_CITED
    confidence = 0.42 + min(0.22, mentions * 0.06)
    if first_mention_index(text, domain) < 300:
        confidence += 0.04
    if mentions >= 3:
        confidence += 0.03
    return Verdict(cited=True, confidence=round(confidence, 2))


_SCORERS: dict[ProviderFamily, Callable[[str, str, Sequence[str]], Verdict]] = {
    ProviderFamily.CITATION_LINK: score_citation_links,
    ProviderFamily.GROUNDED: score_grounded,
    ProviderFamily.KNOWLEDGE_ONLY: score_knowledge_only,
}


def score_response(
    family: ProviderFamily,
    domain: str,
    text: str,
    urls: Sequence[str] = (),
) -> Verdict:
    """Score a provider answer with the evidence model of its family.

    Args:
        family: Provider family selecting the evidence model.
        domain: Cleaned domain being monitored.
        text: Answer body.
        urls: Evidence URLs returned by the provider.

    Returns:
        The cited decision and its confidence.
    """
    return _SCORERS[family](domain, text, urls)
