"""
Process-wide throughput limiting for remote model calls.
"""

from transcript_labeler.ratelimit.throughput import IntervalRateLimiter

__all__ = ["IntervalRateLimiter"]
