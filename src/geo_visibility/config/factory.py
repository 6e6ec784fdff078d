"""Factory functions to create components from configuration."""

import os
from pathlib import Path

from geo_visibility.config.models import (
    ClaudeProviderConfig,
    EngineConfig,
    GeminiProviderConfig,
    OpenAIProviderConfig,
    PerplexityProviderConfig,
    ProviderConfig,
    TrustSourcesConfig,
)
from geo_visibility.events import EventSink
from geo_visibility.gaps.analyzer import GapAnalyzer
from geo_visibility.pipeline.dispatcher import CheckEngine
from geo_visibility.providers.base import CitationChecker
from geo_visibility.providers.claude import ClaudeChecker
from geo_visibility.providers.gemini import GeminiChecker
from geo_visibility.providers.openai import OpenAIChecker
from geo_visibility.providers.perplexity import PerplexityChecker
from geo_visibility.run_logger import RunLogger
from geo_visibility.scoring.aggregator import ScoreAggregator
from geo_visibility.store.base import CheckStore
from geo_visibility.trust.presence import TrustSourceChecker


def resolve_api_key(env_vars: tuple[str, ...]) -> str | None:
    """First non-empty value among the given environment variables."""
    for name in env_vars:
        value = os.environ.get(name)
        if value:
            return value
    return None


def create_provider(config: ProviderConfig) -> CitationChecker:
    """Create a provider adapter from config.

    Uses explicit type matching rather than getattr. A missing key is not an
    error; the adapter reports itself as unconfigured.
    """
    api_key = resolve_api_key(config.api_key_env)
    if isinstance(config, PerplexityProviderConfig):
        return PerplexityChecker(
            api_key=api_key, model=config.model, timeout_seconds=config.timeout_seconds
        )
    if isinstance(config, GeminiProviderConfig):
        return GeminiChecker(
            api_key=api_key,
            model=config.model,
            timeout_seconds=config.timeout_seconds,
            temperature=config.temperature,
            max_output_tokens=config.max_output_tokens,
        )
    if isinstance(config, OpenAIProviderConfig):
        return OpenAIChecker(
            api_key=api_key,
            model=config.model,
            timeout_seconds=config.timeout_seconds,
            max_completion_tokens=config.max_completion_tokens,
        )
    if isinstance(config, ClaudeProviderConfig):
        return ClaudeChecker(
            api_key=api_key,
            model=config.model,
            max_searches_per_query=config.max_searches_per_query,
            timeout_seconds=config.timeout_seconds,
        )
    msg = f"Unknown provider config type: {type(config)}"
    raise ValueError(msg)


def create_trust_checker(config: TrustSourcesConfig) -> TrustSourceChecker | None:
    """Create the trust-source sweep, or None when disabled."""
    if not config.enabled:
        return None
    return TrustSourceChecker(
        create_provider(config.provider),
        sources=config.sources,
        delay_seconds=config.delay_seconds,
    )


def create_from_config(
    config: EngineConfig,
    *,
    store: CheckStore | None = None,
    event_sink: EventSink | None = None,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> tuple[CheckEngine, RunLogger | None]:
    """Create a complete engine from root config.

    Args:
        config: Root configuration.
        store: Persistence backend; without one nothing is written.
        event_sink: Destination for outbound events.
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.

    Returns:
        Tuple of (engine, run_logger).
        run_logger is None if logging is disabled.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)

    run_logger: RunLogger | None = None
    if log_enabled:
        run_logger = RunLogger(log_dir=log_dir, enabled=True)

    engine = CheckEngine(
        [create_provider(p) for p in config.providers],
        trust_checker=create_trust_checker(config.trust_sources),
        store=store,
        aggregator=ScoreAggregator(old_weight=config.scoring.ema_old_weight),
        gap_analyzer=GapAnalyzer(history_depth=config.gaps.history_depth),
        event_sink=event_sink,
        run_logger=run_logger,
    )
    return (engine, run_logger)
