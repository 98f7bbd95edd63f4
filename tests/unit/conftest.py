"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without external dependencies.
"""

import pytest
from unittest.mock import AsyncMock

from transcript_labeler.classifier.gateway import ClassifierGateway
from transcript_labeler.models.llm_models import LLMGenerationResponse
from transcript_labeler.quota.tracker import QuotaTracker
from transcript_labeler.ratelimit.throughput import IntervalRateLimiter


class FakeClock:
    """Manually advanced clock for quota and limiter tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def no_wait_limiter() -> IntervalRateLimiter:
    """Limiter with a zero interval."""
    return IntervalRateLimiter(interval_seconds=0.0)


@pytest.fixture
def quota_tracker(fake_clock: FakeClock) -> QuotaTracker:
    """QuotaTracker with small limits on a fake clock."""
    return QuotaTracker(identified_limit=3, anonymous_limit=5, window_seconds=3600, clock=fake_clock)


@pytest.fixture
def make_llm_response():
    """Factory for LLMGenerationResponse with the given content."""
    def _create(content: str) -> LLMGenerationResponse:
        return LLMGenerationResponse(
            content=content,
            model_version="claude-3-5-sonnet-20240620",
            finish_reason="end_turn",
            prompt_tokens=250,
            completion_tokens=120,
            latency_ms=900,
        )

    return _create


@pytest.fixture
def mock_llm_client(make_llm_response):
    """AsyncMock LLM client returning a fixed two-item JSON array."""
    mock = AsyncMock()
    mock.generate = AsyncMock(return_value=make_llm_response(
        '[{"text": "We need to gather more requirements from the client.", "category": "PROB"},'
        ' {"text": "Let\'s brainstorm possible design alternatives.", "category": "SOLN"}]'
    ))
    mock.health_check = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def create_gateway(prompt_builder, no_wait_limiter):
    """Factory fixture for ClassifierGateway around a given client.

    Usage:
        def test_something(create_gateway, echo_llm_client):
            gateway = create_gateway(echo_llm_client, debug_mode=True)
    """
    def _create(llm_client, debug_mode: bool = False, debug_api: bool = False, rate_limiter=None, **kwargs):
        # Single attempt unless a test asks for retries; backoff never sleeps
        kwargs.setdefault("max_attempts", 1)
        kwargs.setdefault("sleep", AsyncMock())
        return ClassifierGateway(
            llm_client=llm_client,
            prompt_builder=prompt_builder,
            rate_limiter=rate_limiter or no_wait_limiter,
            debug_mode=debug_mode,
            debug_api=debug_api,
            **kwargs,
        )

    return _create
