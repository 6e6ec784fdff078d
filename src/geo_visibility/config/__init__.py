"""Configuration module for the citation engine."""

from geo_visibility.config.factory import create_from_config, create_provider
from geo_visibility.config.loader import get_default_config_path, load_config
from geo_visibility.config.models import (
    ClaudeProviderConfig,
    EngineConfig,
    GapsConfig,
    GeminiProviderConfig,
    LoggingConfig,
    OpenAIProviderConfig,
    PerplexityProviderConfig,
    ProviderConfig,
    ScoringConfig,
    TrustSourcesConfig,
)

__all__ = [
    "ClaudeProviderConfig",
    "EngineConfig",
    "GapsConfig",
    "GeminiProviderConfig",
    "LoggingConfig",
    "OpenAIProviderConfig",
    "PerplexityProviderConfig",
    "ProviderConfig",
    "ScoringConfig",
    "TrustSourcesConfig",
    "create_from_config",
    "create_provider",
    "get_default_config_path",
    "load_config",
]
