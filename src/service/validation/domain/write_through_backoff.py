from datetime import datetime, timedelta
from typing import Optional


class WriteThroughBackoff:
    """
    Capped exponential backoff for the validation-time write-through.

    After n consecutive failures the write-through is skipped for
    base * 2**(n-1) seconds, capped at max_seconds. Skipped validations keep
    needs_sync and are picked up by the next sync cycle. Any success resets.
    """

    def __init__(self, *, base_seconds: float, max_seconds: float) -> None:
        self._base_seconds = base_seconds
        self._max_seconds = max_seconds
        self._failures = 0
        self._retry_at: Optional[datetime] = None

    @property
    def failures(self) -> int:
        return self._failures

    @property
    def retry_at(self) -> Optional[datetime]:
        return self._retry_at

    def allows(self, *, now: datetime) -> bool:
        return self._retry_at is None or now >= self._retry_at

    def record_success(self) -> None:
        self._failures = 0
        self._retry_at = None

    def record_failure(self, *, now: datetime) -> None:
        self._failures += 1
        delay = min(self._base_seconds * 2 ** (self._failures - 1), self._max_seconds)
        self._retry_at = now + timedelta(seconds=delay)
