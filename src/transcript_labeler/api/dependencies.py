"""
FastAPI dependency injection for the Transcript Labeler.

Provides singleton instances of the process-wide services (quota tracker,
throughput limiter, LLM client, gateway) and the orchestrator that uses them.
Singletons live from first use to process exit.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from transcript_labeler.classifier.gateway import ClassifierGateway
from transcript_labeler.config import Settings, settings
from transcript_labeler.llm.anthropic_client import AnthropicClient
from transcript_labeler.llm.base_client import BaseLLMClient
from transcript_labeler.llm.prompt_builder import PromptBuilder
from transcript_labeler.orchestrator import RequestOrchestrator
from transcript_labeler.quota.tracker import QuotaTracker
from transcript_labeler.ratelimit.throughput import IntervalRateLimiter
from transcript_labeler.validation.response_parser import ResponseParser


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance
    """
    return settings


@lru_cache()
def get_quota_tracker() -> QuotaTracker:
    """
    Get the process-wide quota tracker.

    Returns:
        QuotaTracker configured from settings
    """
    current = get_settings()
    return QuotaTracker(
        identified_limit=current.QUOTA_LIMIT_IDENTIFIED,
        anonymous_limit=current.QUOTA_LIMIT_ANONYMOUS,
        window_seconds=current.QUOTA_WINDOW_SECONDS,
    )


@lru_cache()
def get_rate_limiter() -> IntervalRateLimiter:
    """
    Get the process-wide throughput limiter.

    Every remote call, from every request, goes through this instance.
    """
    return IntervalRateLimiter(interval_seconds=get_settings().RATE_LIMIT_INTERVAL_SECONDS)


@lru_cache()
def get_llm_client() -> Optional[BaseLLMClient]:
    """
    Get singleton LLM client with connection pooling.

    Returns None when debug mode bypasses remote calls, so the service can
    run without an API key during development.
    """
    current = get_settings()
    if current.DEBUG_MODE and not current.DEBUG_API:
        return None
    return AnthropicClient(
        api_key=current.ANTHROPIC_API_KEY,
        base_url=current.ANTHROPIC_BASE_URL,
        api_version=current.ANTHROPIC_API_VERSION,
        timeout=current.ANTHROPIC_TIMEOUT,
    )


@lru_cache()
def get_prompt_builder() -> PromptBuilder:
    """
    Get singleton prompt builder.

    Loads Jinja2 templates once and reuses them across requests.
    """
    current = get_settings()
    return PromptBuilder(
        templates_dir=Path(current.PROMPT_TEMPLATES_DIR),
        default_model=current.ANTHROPIC_MODEL,
        default_max_tokens=current.LLM_MAX_TOKENS,
    )


@lru_cache()
def get_classifier_gateway() -> ClassifierGateway:
    """Get singleton classifier gateway."""
    current = get_settings()
    return ClassifierGateway(
        llm_client=get_llm_client(),
        prompt_builder=get_prompt_builder(),
        rate_limiter=get_rate_limiter(),
        response_parser=ResponseParser(),
        debug_mode=current.DEBUG_MODE,
        debug_api=current.DEBUG_API,
        max_attempts=current.LLM_MAX_RETRIES,
    )


def get_orchestrator() -> RequestOrchestrator:
    """
    Create request orchestrator with injected services.

    Note: The orchestrator is NOT cached because it holds no state of its own.
    The quota tracker and gateway it wraps are singletons.
    """
    return RequestOrchestrator(
        quota_tracker=get_quota_tracker(),
        gateway=get_classifier_gateway(),
        settings=get_settings(),
    )
