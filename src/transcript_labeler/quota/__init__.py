"""
Per-caller hourly quotas.

Components:
- QuotaTracker: in-memory sliding-hour admission counter
- QuotaRecord: per-caller counter and reset time
"""

from transcript_labeler.quota.tracker import QuotaRecord, QuotaTracker

__all__ = ["QuotaRecord", "QuotaTracker"]
