"""Pydantic configuration models for the citation engine."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator

from geo_visibility.trust.sources import DEFAULT_PRESENCE_SOURCES

# ============================================================
# Provider Configs
# ============================================================


class PerplexityProviderConfig(BaseModel):
    """Configuration for PerplexityChecker."""

    type: Literal["perplexity"] = "perplexity"
    model: str = "sonar"
    timeout_seconds: float = 30.0
    api_key_env: tuple[str, ...] = ("PERPLEXITY_API_KEY",)

    model_config = {"frozen": True}


class GeminiProviderConfig(BaseModel):
    """Configuration for GeminiChecker."""

    type: Literal["gemini"] = "gemini"
    model: str = "gemini-2.5-flash"
    timeout_seconds: float = 30.0
    api_key_env: tuple[str, ...] = ("GOOGLE_AI_API_KEY", "GEMINI_API_KEY")
    temperature: float = 0.1
    max_output_tokens: int = 1024

    model_config = {"frozen": True}


class OpenAIProviderConfig(BaseModel):
    """Configuration for OpenAIChecker."""

    type: Literal["openai"] = "openai"
    model: str = "gpt-5-mini"
    timeout_seconds: float = 30.0
    api_key_env: tuple[str, ...] = ("OPENAI_API_KEY",)
    max_completion_tokens: int = 4000

    model_config = {"frozen": True}


class ClaudeProviderConfig(BaseModel):
    """Configuration for ClaudeChecker."""

    type: Literal["claude"] = "claude"
    model: str = "claude-haiku-4-5-20251001"
    timeout_seconds: float = 30.0
    api_key_env: tuple[str, ...] = ("CLAUDE_API_KEY",)
    max_searches_per_query: int = 1

    model_config = {"frozen": True}


ProviderConfig = Annotated[
    PerplexityProviderConfig | GeminiProviderConfig | OpenAIProviderConfig | ClaudeProviderConfig,
    Field(discriminator="type"),
]


def _default_providers() -> list[ProviderConfig]:
    return [PerplexityProviderConfig(), GeminiProviderConfig(), OpenAIProviderConfig()]


# ============================================================
# Stage Configs
# ============================================================


class TrustSourcesConfig(BaseModel):
    """Trust-source presence sweep."""

    enabled: bool = True
    provider: ProviderConfig = Field(default_factory=PerplexityProviderConfig)
    sources: tuple[str, ...] = DEFAULT_PRESENCE_SOURCES
    delay_seconds: float = 0.2

    model_config = {"frozen": True}


class ScoringConfig(BaseModel):
    """Running score blending."""

    ema_old_weight: float = 0.7

    model_config = {"frozen": True}

    @field_validator("ema_old_weight")
    @classmethod
    def weight_in_range(cls, v: float) -> float:
        if not 0.0 <= v < 1.0:
            raise ValueError(f"ema_old_weight must be in [0, 1), got {v}")
        return v


class GapsConfig(BaseModel):
    """Opportunity analysis."""

    history_depth: int = Field(default=3, ge=1)

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Configuration for intermediate run logging."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class EngineConfig(BaseModel):
    """Root configuration for the citation engine."""

    providers: list[ProviderConfig] = Field(default_factory=_default_providers)
    trust_sources: TrustSourcesConfig = Field(default_factory=TrustSourcesConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    gaps: GapsConfig = Field(default_factory=GapsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}
