"""
Per-caller hourly quota tracking.

Keeps one QuotaRecord per caller in process memory. Records are never swept;
an expired record is replaced on the caller's next admission check. State is
lost on restart and is not shared between processes.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

import structlog

from transcript_labeler.models.classification_models import CallerIdentity


logger = structlog.get_logger(__name__)


@dataclass
class QuotaRecord:
    """
    Admission counter for one caller.

    Attributes:
        count: Requests admitted in the current window
        reset_at: Clock value after which the window expires
    """

    count: int
    reset_at: float


class QuotaTracker:
    """
    Sliding-hour admission counter keyed by caller tier and id.

    Anonymous callers share one identity and get a larger allowance than
    identified callers. The check-and-increment in ``admit`` runs under a lock
    with no suspension point, so concurrent requests from one caller cannot
    both pass the last free slot.
    """

    def __init__(
        self,
        identified_limit: int = 10,
        anonymous_limit: int = 200,
        window_seconds: float = 3600,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize quota tracker.

        Args:
            identified_limit: Hourly limit for callers with a resolved identity
            anonymous_limit: Hourly limit for the shared anonymous identity
            window_seconds: Length of a quota window
            clock: Time source in seconds (defaults to time.time)
        """
        if identified_limit < 0 or anonymous_limit < 0:
            raise ValueError("Quota limits must be >= 0")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self.identified_limit = identified_limit
        self.anonymous_limit = anonymous_limit
        self.window_seconds = window_seconds
        self._clock = clock or time.time
        self._records: dict[tuple[bool, str], QuotaRecord] = {}
        self._lock = threading.Lock()

        logger.info(
            "QuotaTracker initialized",
            identified_limit=identified_limit,
            anonymous_limit=anonymous_limit,
            window_seconds=window_seconds,
        )

    @staticmethod
    def _key(caller: CallerIdentity) -> tuple[bool, str]:
        # An identified caller whose id equals the anonymous id keeps its own bucket
        return caller.anonymous, caller.caller_id

    def limit_for(self, caller: CallerIdentity) -> int:
        """Hourly limit that applies to the caller's tier."""
        return self.anonymous_limit if caller.anonymous else self.identified_limit

    def admit(self, caller: CallerIdentity) -> bool:
        """
        Count one request against the caller's quota.

        Starts a fresh window when the caller has no record or the previous
        window has expired. A rejected request leaves the record untouched.

        Args:
            caller: Resolved caller identity

        Returns:
            True if the request is admitted, False if the limit is reached
        """
        limit = self.limit_for(caller)

        with self._lock:
            now = self._clock()
            record = self._records.get(self._key(caller))
            if record is None or now > record.reset_at:
                record = QuotaRecord(count=0, reset_at=now + self.window_seconds)
                self._records[self._key(caller)] = record

            if record.count >= limit:
                admitted = False
            else:
                record.count += 1
                admitted = True
            count = record.count

        if admitted:
            logger.debug(
                "Quota admitted",
                caller_id=caller.caller_id,
                anonymous=caller.anonymous,
                count=count,
                limit=limit,
            )
        else:
            logger.warning(
                "Quota exceeded",
                caller_id=caller.caller_id,
                anonymous=caller.anonymous,
                limit=limit,
            )
        return admitted

    def remaining(self, caller: CallerIdentity) -> int:
        """Requests the caller may still make in the current window (read-only)."""
        limit = self.limit_for(caller)
        with self._lock:
            record = self._records.get(self._key(caller))
            if record is None or self._clock() > record.reset_at:
                return limit
            return max(limit - record.count, 0)

    def reset(self) -> None:
        """Forget all quota records."""
        with self._lock:
            self._records.clear()
