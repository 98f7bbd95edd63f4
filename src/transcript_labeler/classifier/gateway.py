"""
Classifier gateway: one batch in, one label per text out.

Wires together the prompt builder, the process-wide throughput limiter, the
remote LLM client and the response parser. Parse failures are recovered
locally; transport failures propagate to the orchestrator.

Debug modes:
- debug_mode only: no remote call, every category is ""
- debug_mode + debug_api: real call plus an out-of-band DebugRecord
- debug_api alone: ignored
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional, Sequence

import structlog

from transcript_labeler.llm.base_client import BaseLLMClient
from transcript_labeler.llm.exceptions import LLMClientError, LLMConfigurationError
from transcript_labeler.llm.prompt_builder import PromptBuilder
from transcript_labeler.models.classification_models import (
    BatchClassification,
    DebugRecord,
    LabeledText,
)
from transcript_labeler.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from transcript_labeler.ratelimit.throughput import IntervalRateLimiter
from transcript_labeler.validation.response_parser import Parsed, ResponseParser


logger = structlog.get_logger(__name__)


class ClassifierGateway:
    """
    Classify batches of transcript snippets through the remote model.

    Every remote call start, retries included, takes one slot from the
    process-wide limiter. Retryable client errors (timeouts, network, 429,
    5xx) get up to ``max_attempts`` attempts with exponential backoff.

    Attributes:
        llm_client: Remote model client (None is allowed only in bypass mode)
        prompt_builder: Renders the labeling prompt for a batch
        rate_limiter: Process-wide limiter shared by every gateway call
        response_parser: Parses and reconciles model output
        debug_mode: Skip remote calls unless debug_api is also set
        debug_api: With debug_mode, call the model and attach diagnostics
        max_attempts: Remote calls per batch before a retryable error surfaces
        backoff_base: Backoff before attempt n+1 is backoff_base ** n seconds
    """

    def __init__(
        self,
        llm_client: Optional[BaseLLMClient],
        prompt_builder: PromptBuilder,
        rate_limiter: IntervalRateLimiter,
        response_parser: Optional[ResponseParser] = None,
        debug_mode: bool = False,
        debug_api: bool = False,
        max_attempts: int = 2,
        backoff_base: float = 2.0,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        self.llm_client = llm_client
        self.prompt_builder = prompt_builder
        self.rate_limiter = rate_limiter
        self.response_parser = response_parser or ResponseParser()
        self.debug_mode = debug_mode
        self.debug_api = debug_api
        self.max_attempts = max(1, max_attempts)
        self.backoff_base = backoff_base
        self._sleep = sleep or asyncio.sleep

        if self.calls_remote and llm_client is None:
            raise LLMConfigurationError(
                "An LLM client is required unless remote calls are bypassed",
                details={"debug_mode": debug_mode, "debug_api": debug_api},
            )

        logger.info(
            "ClassifierGateway initialized",
            calls_remote=self.calls_remote,
            diagnostics=self.attaches_diagnostics,
            max_attempts=self.max_attempts,
            rate_limiter=repr(rate_limiter),
        )

    @property
    def calls_remote(self) -> bool:
        return not self.debug_mode or self.debug_api

    @property
    def attaches_diagnostics(self) -> bool:
        return self.debug_mode and self.debug_api

    async def classify(self, batch: Sequence[str]) -> BatchClassification:
        """
        Label every text of a batch.

        Args:
            batch: Non-empty list of snippets

        Returns:
            BatchClassification with one result per text, in batch order

        Raises:
            LLMClientError: The remote call failed or returned no text
        """
        request = self.prompt_builder.build_full_request(batch)

        if not self.calls_remote:
            logger.debug("Debug mode: skipping remote call", prompt=request.prompt)
            return BatchClassification(
                results=[LabeledText.unlabeled(text) for text in batch],
            )

        start_time = time.time()
        response = await self._generate(request)

        outcome = self.response_parser.parse(response.content, batch)
        parsed = isinstance(outcome, Parsed)

        logger.info(
            "Batch classified",
            batch_size=len(batch),
            parsed=parsed,
            call_ms=int((time.time() - start_time) * 1000),
        )

        debug = None
        if self.attaches_diagnostics:
            debug = DebugRecord(prompt=request.prompt, api_response=response.content)

        return BatchClassification(results=outcome.results, debug=debug, parsed=parsed)

    async def _generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """Call the model, one limiter slot per attempt."""
        attempt = 1
        while True:
            wait_seconds = await self.rate_limiter.acquire()
            try:
                return await self.llm_client.generate(request)
            except LLMClientError as e:
                if not e.retryable or attempt >= self.max_attempts:
                    raise
                delay = self.backoff_base ** attempt
                logger.info(
                    "Retrying remote call",
                    error_type=type(e).__name__,
                    attempt=attempt,
                    limiter_wait_ms=int(wait_seconds * 1000),
                    backoff_seconds=delay,
                )
                await self._sleep(delay)
                attempt += 1
