"""Keyword-based buyer-intent scoring for queries."""

DEFAULT_INTENT = 0.5

INTENT_KEYWORDS: dict[str, float] = {
    # Ready to buy
    "best": 1.0,
    "top": 1.0,
    "alternatives": 1.0,
    "alternative to": 1.0,
    "vs": 0.9,
    "versus": 0.9,
    "compared to": 0.9,
    "comparison": 0.9,
    "pricing": 0.9,
    "cost": 0.9,
    "price": 0.9,
    "reviews": 0.8,
    "review": 0.8,
    "for startups": 0.85,
    "for small business": 0.85,
    "for teams": 0.8,
    "free": 0.7,
    "cheap": 0.7,
    "affordable": 0.7,
    # Researching
    "how to use": 0.4,
    "tutorial": 0.3,
    "guide": 0.3,
    # Informational
    "what is": 0.2,
    "who is": 0.2,
    "definition": 0.1,
}


def buyer_intent(query: str) -> float:
    """Score how likely a query comes from someone evaluating vendors.

    Matching is a case-insensitive substring test. The score is the highest
    matched keyword weight, floored at the neutral default of 0.5, so
    informational keywords never pull a query below neutral.

    Args:
        query: Natural-language query text.

    Returns:
        Score in [0.5, 1.0].
    """
    lowered = query.lower()
    score = DEFAULT_INTENT
    for keyword, weight in INTENT_KEYWORDS.items():
        if keyword in lowered:
            score = max(score, weight)
    return score
