"""Question templates used to build check queries."""

CATEGORY_QUERIES: dict[str, list[str]] = {
    "productivity": [
        "What is the best productivity app?",
        "Best note-taking apps for teams",
        "Top productivity tools for remote work",
        "Best apps for organizing projects",
        "What tools do startups use for documentation?",
    ],
    "crm": [
        "What is the best CRM software?",
        "Best CRM for small businesses",
        "Top sales management tools",
        "Salesforce alternatives",
        "Best free CRM tools",
    ],
    "ecommerce": [
        "Best ecommerce platforms",
        "Shopify alternatives",
        "How to start an online store",
        "Best tools for selling online",
        "Top ecommerce solutions for small business",
    ],
    "marketing": [
        "Best marketing automation tools",
        "Top email marketing platforms",
        "Best SEO tools",
        "Social media management tools",
        "Best analytics tools for marketing",
    ],
    "design": [
        "Best design tools for teams",
        "Figma alternatives",
        "Top UI/UX design software",
        "Best prototyping tools",
        "Collaborative design platforms",
    ],
    "development": [
        "Best developer tools",
        "Top code editors",
        "Best hosting platforms for developers",
        "CI/CD tools comparison",
        "Best API management tools",
    ],
    "analytics": [
        "Best analytics platforms",
        "Google Analytics alternatives",
        "Top business intelligence tools",
        "Best data visualization software",
        "Website analytics tools",
    ],
    "communication": [
        "Best team communication tools",
        "Slack alternatives",
        "Top video conferencing software",
        "Best collaboration platforms",
        "Team chat apps comparison",
    ],
    "finance": [
        "Best accounting software",
        "Top invoicing tools",
        "Best expense tracking apps",
        "Payroll software for small business",
        "Financial planning tools",
    ],
    "education": [
        "Best online learning platforms",
        "Top educational tools",
        "E-learning software comparison",
        "Best LMS platforms",
        "Online course creation tools",
    ],
}

# Placeholders: {brand}, {domain}
BASE_TEMPLATES: list[str] = [
    "What is {brand} and what do they do?",
    "Tell me about {domain}",
    "What are the best alternatives to {brand}?",
]

# Placeholders: {brand}, {domain}, {year}
INTENT_TEMPLATES: list[str] = [
    "Best alternatives to {brand} {year}",
    "{brand} vs competitors comparison",
    "Is {brand} any good?",
    "Products similar to {brand}",
    "{brand} reviews and pricing",
    "Should I use {brand}?",
    "{brand} pros and cons",
    "Who competes with {brand}?",
    "Top tools like {brand}",
    "What do people think about {brand}?",
    "How does {brand} compare to other options?",
    "{brand} features overview",
    "Recommend something like {domain}",
    "Why do people choose {brand}?",
    "{brand} for small businesses",
]


def category_queries(category: str | None) -> list[str]:
    """Return the template list for a category (case-insensitive), or []."""
    if not category:
        return []
    return list(CATEGORY_QUERIES.get(category.strip().lower(), []))
