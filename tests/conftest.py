"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import json
import re
from pathlib import Path

import pytest

from transcript_labeler.config import DEFAULT_PROMPT_TEMPLATES_DIR, Settings
from transcript_labeler.llm.base_client import BaseLLMClient
from transcript_labeler.llm.prompt_builder import PromptBuilder
from transcript_labeler.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


SNIPPETS_MARKER = re.compile(r"Format as JSON array:\s*", re.MULTILINE)


class EchoLLMClient(BaseLLMClient):
    """Stub remote model that labels whatever snippets the prompt carries.

    Categories come from ``labels`` (text -> category), defaulting to PROB.
    Every call is recorded so tests can count remote calls and check order.
    """

    def __init__(self, labels: dict[str, str] | None = None, content_override: str | None = None):
        super().__init__(base_url="http://stub")
        self.labels = labels or {}
        self.content_override = content_override
        self.calls: list[list[str]] = []

    @staticmethod
    def snippets_from_prompt(prompt: str) -> list[str]:
        match = SNIPPETS_MARKER.search(prompt)
        assert match is not None, "prompt does not embed a snippet list"
        return [item["text"] for item in json.loads(prompt[match.end():])]

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        snippets = self.snippets_from_prompt(request.prompt)
        self.calls.append(snippets)
        if self.content_override is not None:
            content = self.content_override
        else:
            content = json.dumps(
                [{"text": text, "category": self.labels.get(text, "PROB")} for text in snippets]
            )
        return LLMGenerationResponse(
            content=content,
            model_version=request.model,
            finish_reason="end_turn",
            latency_ms=1,
        )

    async def health_check(self) -> bool:
        return True


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.MAX_BATCH_CHARS = 10
    """
    return Settings(
        # === Application ===
        APP_NAME="Transcript Labeler (Test)",
        APP_VERSION="0.1.0",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Anthropic ===
        ANTHROPIC_API_KEY="test-key",
        ANTHROPIC_BASE_URL="https://anthropic.test",
        ANTHROPIC_MODEL="claude-3-5-sonnet-20240620",

        # === Batching / throughput ===
        MAX_BATCH_CHARS=4000,
        CONCURRENT_DISPATCH=True,
        RATE_LIMIT_INTERVAL_SECONDS=0.0,  # No waiting in tests unless explicitly needed

        # === Quota ===
        QUOTA_LIMIT_IDENTIFIED=10,
        QUOTA_LIMIT_ANONYMOUS=200,

        # === Flags ===
        DEBUG_MODE=False,
        DEBUG_API=False,
        PROMETHEUS_ENABLED=False,
    )


@pytest.fixture
def templates_dir() -> Path:
    """Directory holding the packaged prompt templates."""
    return Path(DEFAULT_PROMPT_TEMPLATES_DIR)


@pytest.fixture
def prompt_builder(templates_dir: Path) -> PromptBuilder:
    """PromptBuilder over the packaged templates."""
    return PromptBuilder(templates_dir=templates_dir)


@pytest.fixture
def echo_llm_client() -> EchoLLMClient:
    """Stub remote model labeling every snippet PROB."""
    return EchoLLMClient()


@pytest.fixture
def create_echo_client():
    """Factory fixture for EchoLLMClient with custom labels or raw content.

    Usage:
        def test_something(create_echo_client):
            client = create_echo_client(labels={"Let's build it.": "SOLN"})
    """
    def _create(labels: dict[str, str] | None = None, content_override: str | None = None) -> EchoLLMClient:
        return EchoLLMClient(labels=labels, content_override=content_override)

    return _create


@pytest.fixture
def sample_entries() -> list[dict]:
    """Two snippets from a design conversation."""
    return [
        {"text": "We need to gather more requirements from the client."},
        {"text": "Let's brainstorm possible design alternatives."},
    ]
