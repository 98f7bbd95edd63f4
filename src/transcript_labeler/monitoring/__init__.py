"""Monitoring and metrics instrumentation for the Transcript Labeler.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from transcript_labeler.monitoring.metrics import (
    batches_dispatched_total,
    categorize_requests_total,
    llm_latency_seconds,
    llm_tokens_total,
    parse_outcomes_total,
    quota_rejections_total,
    rate_limiter_wait_seconds,
)

__all__ = [
    "categorize_requests_total",
    "quota_rejections_total",
    "batches_dispatched_total",
    "parse_outcomes_total",
    "llm_latency_seconds",
    "llm_tokens_total",
    "rate_limiter_wait_seconds",
]
