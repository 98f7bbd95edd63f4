"""Custom Prometheus metrics for the Transcript Labeler.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- parse_outcomes_total (high unparseable ratio indicates prompt or model drift)
- quota_rejections_total (sustained rejections for identified callers)
- rate_limiter_wait_seconds (queueing in front of the remote model)
"""

from prometheus_client import Counter, Histogram

# === Request Metrics ===

categorize_requests_total = Counter(
    "categorize_requests_total",
    "Total categorize requests by outcome",
    ["status"],
)
"""
Categorize requests counter.

Labels:
- status: success, rate_limited, error
"""

quota_rejections_total = Counter(
    "quota_rejections_total",
    "Requests rejected by the per-caller hourly quota",
    ["tier"],
)
"""
Quota rejections counter.

Labels:
- tier: anonymous, identified
"""

batches_dispatched_total = Counter(
    "batches_dispatched_total",
    "Total batches handed to the classifier gateway",
)

# === Parsing Metrics ===

parse_outcomes_total = Counter(
    "parse_outcomes_total",
    "Model output parse outcomes by path",
    ["outcome"],
)
"""
Parse outcome counter.

Labels:
- outcome: strict (whole content parsed), extracted (JSON found inside commentary),
  unparseable (fallback to empty categories)

Alert thresholds:
- WARN: unparseable > 5% of batches
"""

# === LLM Performance Metrics ===

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "LLM generation latency in seconds",
    ["model", "success"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)
"""
LLM generation latency histogram.

Labels:
- model: Model name (e.g., claude-3-5-sonnet-20240620)
- success: true (generation succeeded), false (generation failed)
"""

llm_tokens_total = Counter(
    "llm_tokens_total",
    "Total tokens consumed by model and type",
    ["model", "token_type"],
)
"""
Token consumption counter.

Labels:
- model: Model name
- token_type: prompt (input tokens), completion (output tokens)

Used for cost estimation and capacity planning.
"""

# === Throughput Limiter Metrics ===

rate_limiter_wait_seconds = Histogram(
    "rate_limiter_wait_seconds",
    "Time a remote call waited for its slot in the global throughput limiter",
    buckets=[0.0, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)
