from geo_visibility.providers.base import CitationChecker, ProviderAnswer
from geo_visibility.providers.claude import ClaudeChecker
from geo_visibility.providers.gemini import GeminiChecker
from geo_visibility.providers.openai import OpenAIChecker
from geo_visibility.providers.perplexity import PerplexityChecker

__all__ = [
    "CitationChecker",
    "ClaudeChecker",
    "GeminiChecker",
    "OpenAIChecker",
    "PerplexityChecker",
    "ProviderAnswer",
]
