"""
Abstract remote-model client.

The classifier gateway only talks to this interface, so tests can swap in a
stub model and the provider can change without touching batching or parsing.
"""

from abc import ABC, abstractmethod

import structlog

from transcript_labeler.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Send one labeling prompt, get back the model's raw text.

    Implementations own transport concerns only: connection pooling and
    timeouts. One generate call is one remote call; retries belong to the
    gateway, which takes a throughput slot per attempt, and label parsing
    to the ResponseParser.
    """

    def __init__(self, base_url: str, timeout: int = 60, **kwargs):
        """
        Args:
            base_url: Provider API root, trailing slash optional
            timeout: Per-request timeout in seconds
            **kwargs: Provider-specific options kept in ``extra_config``
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.extra_config = kwargs

        logger.info(
            "LLM client created",
            client=type(self).__name__,
            base_url=self.base_url,
            timeout=timeout,
        )

    @abstractmethod
    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Run one generation and return its text.

        Raises:
            LLMTimeoutError: The call timed out (retryable)
            LLMConnectionError: Provider unreachable (retryable)
            LLMRateLimitError: Provider answered 429 (retryable)
            LLMGenerationError: Provider error status or no textual payload
                (retryable for 5xx only)
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Return True when the provider answers; never raises.

        Backs GET /health?remote=true. Must not run a generation, so it
        consumes neither tokens nor a throughput slot.
        """

    async def close(self) -> None:
        """Release pooled connections. No-op for clients without any."""
        logger.debug("LLM client closed", client=type(self).__name__)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url}, timeout={self.timeout}s)"
