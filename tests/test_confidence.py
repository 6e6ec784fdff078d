"""Tests for the per-family evidence models."""

import pytest

from geo_visibility.data import ProviderFamily
from geo_visibility.scoring import (
    score_citation_links,
    score_grounded,
    score_knowledge_only,
    score_response,
)
from geo_visibility.scoring.confidence import count_matching_links, is_unknown_answer


class TestCitationLinks:
    def test_two_links_and_body_mention(self) -> None:
        verdict = score_citation_links(
            "acme.io",
            "Acme.io is a popular choice.",
            ["https://acme.io/pricing", "https://www.acme.io/blog", "https://other.com"],
        )
        assert verdict.cited
        assert verdict.confidence == 0.93

    def test_single_link_no_mention(self) -> None:
        verdict = score_citation_links("acme.io", "A popular choice.", ["https://acme.io"])
        assert verdict.confidence == 0.88

    def test_subdomain_link_counts(self) -> None:
        verdict = score_citation_links("acme.io", "", ["https://docs.acme.io/start"])
        assert verdict.cited

    def test_link_confidence_capped(self) -> None:
        urls = [f"https://acme.io/page{i}" for i in range(20)]
        assert score_citation_links("acme.io", "", urls).confidence == 0.97
        assert score_citation_links("acme.io", "see acme.io", urls).confidence == 0.98

    def test_monotonic_in_matching_links(self) -> None:
        previous = 0.0
        for n in range(1, 12):
            urls = [f"https://acme.io/{i}" for i in range(n)]
            confidence = score_citation_links("acme.io", "acme.io rocks", urls).confidence
            assert confidence >= previous
            assert confidence <= 0.98
            previous = confidence

    def test_body_only_early_mention(self) -> None:
        verdict = score_citation_links("acme.io", "acme.io is good.", [])
        assert verdict.cited
        # 0.62 + 0.04 + 0.03
        assert verdict.confidence == 0.69

    def test_body_only_late_mention(self) -> None:
        text = "x" * 600 + " acme.io"
        assert score_citation_links("acme.io", text, []).confidence == 0.66

    def test_body_only_mention_contribution_capped(self) -> None:
        text = " ".join(["acme.io"] * 10)
        # 0.62 + 0.14 + 0.03
        assert score_citation_links("acme.io", text, []).confidence == 0.79

    def test_not_cited(self) -> None:
        verdict = score_citation_links("acme.io", "Try Globex.", ["https://globex.com"])
        assert not verdict.cited
        assert verdict.confidence == 0.0


class TestGrounded:
    def test_single_chunk(self) -> None:
        assert score_grounded("acme.io", "", ["https://acme.io"]).confidence == 0.82

    def test_chunks_with_mention(self) -> None:
        urls = ["https://acme.io/a", "https://acme.io/b"]
        assert score_grounded("acme.io", "acme.io", urls).confidence == 0.88

    def test_chunk_caps(self) -> None:
        urls = [f"https://acme.io/{i}" for i in range(10)]
        assert score_grounded("acme.io", "", urls).confidence == 0.95
        assert score_grounded("acme.io", "acme.io", urls).confidence == 0.97

    def test_body_only(self) -> None:
        assert score_grounded("acme.io", "acme.io and acme.io", []).confidence == 0.68

    def test_body_only_cap(self) -> None:
        text = " ".join(["acme.io"] * 10)
        assert score_grounded("acme.io", text, []).confidence == 0.75


class TestKnowledgeOnly:
    def test_single_early_mention(self) -> None:
        verdict = score_knowledge_only("acme.io", "acme.io is a CRM.")
        assert verdict.cited
        # 0.42 + 0.06 + 0.04
        assert verdict.confidence == 0.52

    def test_three_mentions_bonus(self) -> None:
        text = "acme.io, acme.io and acme.io"
        # 0.42 + 0.18 + 0.04 + 0.03
        assert score_knowledge_only("acme.io", text).confidence == 0.67

    def test_late_mention(self) -> None:
        text = "y" * 400 + "acme.io"
        assert score_knowledge_only("acme.io", text).confidence == 0.48

    @pytest.mark.parametrize(
        "text",
        [
            "I don't have information about acme.io.",
            "I'm not familiar with acme.io.",
            "I am not aware of acme.io.",
            "No information available on acme.io.",
        ],
    )
    def test_unknown_phrases_disqualify(self, text: str) -> None:
        assert not score_knowledge_only("acme.io", text).cited

    def test_not_mentioned(self) -> None:
        assert not score_knowledge_only("acme.io", "Globex is great.").cited

    def test_lower_than_citation_link_for_same_mentions(self) -> None:
        text = "acme.io is great"
        assert (
            score_knowledge_only("acme.io", text).confidence
            < score_citation_links("acme.io", text, []).confidence
        )


def test_is_unknown_answer_case_insensitive() -> None:
    assert is_unknown_answer("Sorry, I DON'T KNOW that company.")
    assert not is_unknown_answer("Acme is a CRM.")


def test_count_matching_links() -> None:
    urls = ["https://acme.io", "https://blog.acme.io/x", "https://notacme.io"]
    assert count_matching_links("acme.io", urls) == 2


@pytest.mark.parametrize(
    ("family", "expected"),
    [
        (ProviderFamily.CITATION_LINK, 0.90),
        (ProviderFamily.GROUNDED, 0.84),
        (ProviderFamily.KNOWLEDGE_ONLY, 0.52),
    ],
)
def test_score_response_dispatches_by_family(family: ProviderFamily, expected: float) -> None:
    verdict = score_response(family, "acme.io", "acme.io is good", ["https://acme.io"])
    assert verdict.confidence == expected
