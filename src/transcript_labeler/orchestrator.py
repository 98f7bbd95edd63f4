"""
Request orchestrator: the top-level categorize operation.

Usage:
    orchestrator = RequestOrchestrator(quota_tracker, gateway, settings)
    response = await orchestrator.handle(body, principal_header)
    # response.status_code, response.body
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Optional

import structlog

from transcript_labeler.batching.batcher import batch_texts, extract_texts, flatten
from transcript_labeler.classifier.gateway import ClassifierGateway
from transcript_labeler.config import Settings
from transcript_labeler.identity import resolve_caller_identity
from transcript_labeler.models.classification_models import BatchClassification
from transcript_labeler.monitoring.metrics import (
    batches_dispatched_total,
    categorize_requests_total,
    quota_rejections_total,
)
from transcript_labeler.quota.tracker import QuotaTracker

logger = structlog.get_logger(__name__)

RATE_LIMIT_MESSAGE = "Hourly limit exceeded"


@dataclass(frozen=True)
class OrchestratorResponse:
    """
    Response value returned by the orchestrator.

    Built once per request and never mutated; the HTTP layer only
    serializes it.
    """

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, results: list[dict[str, Any]]) -> "OrchestratorResponse":
        return cls(status_code=200, body={"success": True, "results": results})

    @classmethod
    def rate_limited(cls) -> "OrchestratorResponse":
        return cls(status_code=429, body={"error": RATE_LIMIT_MESSAGE})

    @classmethod
    def failure(cls, message: str) -> "OrchestratorResponse":
        return cls(status_code=500, body={"success": False, "error": message})


class RequestOrchestrator:
    """
    Resolve identity, enforce quota, batch, classify and flatten.

    The quota tracker and the gateway (with its throughput limiter) are
    process-wide services injected at construction.
    """

    def __init__(
        self,
        quota_tracker: QuotaTracker,
        gateway: ClassifierGateway,
        settings: Settings,
    ):
        self.quota_tracker = quota_tracker
        self.gateway = gateway
        self.max_batch_chars = settings.MAX_BATCH_CHARS
        self.concurrent_dispatch = settings.CONCURRENT_DISPATCH
        self.anonymous_caller_id = settings.ANONYMOUS_CALLER_ID

    async def handle(self, body: Any, principal_header: Optional[str] = None) -> OrchestratorResponse:
        """
        Categorize the entries of one request.

        Args:
            body: Decoded request body, expected {"entries": [{"text": ...}, ...]}
            principal_header: Raw trust header value, if any

        Returns:
            OrchestratorResponse: 200 with results, 429 on quota rejection,
            500 with the error message on any failure
        """
        try:
            caller = resolve_caller_identity(principal_header, self.anonymous_caller_id)
            structlog.contextvars.bind_contextvars(caller_id=caller.caller_id)

            if not self.quota_tracker.admit(caller):
                quota_rejections_total.labels(
                    tier="anonymous" if caller.anonymous else "identified"
                ).inc()
                categorize_requests_total.labels(status="rate_limited").inc()
                return OrchestratorResponse.rate_limited()

            texts = extract_texts(body)
            batches = batch_texts(texts, self.max_batch_chars)

            logger.info(
                "Categorize request admitted",
                anonymous=caller.anonymous,
                identity_source=caller.source,
                texts=len(texts),
                batches=len(batches),
            )

            classifications = await self._dispatch(batches)
            results = flatten(classification.to_payload() for classification in classifications)

            categorize_requests_total.labels(status="success").inc()
            return OrchestratorResponse.success(results)

        except Exception as exc:
            categorize_requests_total.labels(status="error").inc()
            logger.error(
                "Categorize request failed",
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
            )
            return OrchestratorResponse.failure(str(exc))

    async def _dispatch(self, batches: list[list[str]]) -> list[BatchClassification]:
        """
        Classify every batch, returning results in submission order.

        Concurrent dispatch creates one task per batch in order; the gateway's
        FIFO limiter then starts the remote calls in that same order. On the
        first failure the remaining tasks are cancelled.
        """
        batches_dispatched_total.inc(len(batches))

        if not self.concurrent_dispatch:
            return [await self.gateway.classify(batch) for batch in batches]

        tasks = [asyncio.ensure_future(self.gateway.classify(batch)) for batch in batches]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
