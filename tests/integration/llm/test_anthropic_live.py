"""Integration tests against the live Anthropic API.

Run with: ANTHROPIC_API_KEY=... pytest -m integration
Tests are skipped if no key is configured.
"""

import pytest
import pytest_asyncio

from transcript_labeler.classifier.gateway import ClassifierGateway
from transcript_labeler.llm.anthropic_client import AnthropicClient
from transcript_labeler.ratelimit.throughput import IntervalRateLimiter


pytestmark = pytest.mark.integration


@pytest_asyncio.fixture
async def anthropic_client(anthropic_api_key):
    client = AnthropicClient(api_key=anthropic_api_key, timeout=60)
    yield client
    await client.close()


@pytest.mark.asyncio
async def test_health_check(anthropic_client):
    assert await anthropic_client.health_check() is True


@pytest.mark.asyncio
async def test_labels_sample_batch(anthropic_client, prompt_builder):
    batch = [
        "We need to gather more requirements from the client.",
        "Let's brainstorm possible design alternatives.",
    ]
    gateway = ClassifierGateway(
        llm_client=anthropic_client,
        prompt_builder=prompt_builder,
        rate_limiter=IntervalRateLimiter(interval_seconds=1.0),
    )

    classification = await gateway.classify(batch)

    assert [result.text for result in classification.results] == batch
    assert all(result.category in ("PROB", "SOLN", "") for result in classification.results)
