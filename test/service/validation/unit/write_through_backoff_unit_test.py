from datetime import timedelta

import pytest

from src.service.validation.domain.write_through_backoff import WriteThroughBackoff
from test.service.validation.validation_fakes import NOON_UTC


pytestmark = pytest.mark.unit


class TestWriteThroughBackoff:
    def test_fresh_backoff_allows(self):
        backoff = WriteThroughBackoff(base_seconds=5, max_seconds=120)

        assert backoff.allows(now=NOON_UTC) is True
        assert backoff.retry_at is None

    def test_window_doubles_per_failure(self):
        backoff = WriteThroughBackoff(base_seconds=5, max_seconds=120)

        backoff.record_failure(now=NOON_UTC)
        assert backoff.retry_at == NOON_UTC + timedelta(seconds=5)

        backoff.record_failure(now=NOON_UTC)
        assert backoff.retry_at == NOON_UTC + timedelta(seconds=10)

        backoff.record_failure(now=NOON_UTC)
        assert backoff.retry_at == NOON_UTC + timedelta(seconds=20)
        assert backoff.failures == 3

    def test_window_is_capped(self):
        backoff = WriteThroughBackoff(base_seconds=5, max_seconds=30)

        for _ in range(10):
            backoff.record_failure(now=NOON_UTC)

        assert backoff.retry_at == NOON_UTC + timedelta(seconds=30)

    def test_allows_again_once_window_passed(self):
        backoff = WriteThroughBackoff(base_seconds=5, max_seconds=120)
        backoff.record_failure(now=NOON_UTC)

        assert backoff.allows(now=NOON_UTC + timedelta(seconds=4)) is False
        assert backoff.allows(now=NOON_UTC + timedelta(seconds=5)) is True

    def test_success_resets(self):
        backoff = WriteThroughBackoff(base_seconds=5, max_seconds=120)
        backoff.record_failure(now=NOON_UTC)

        backoff.record_success()

        assert backoff.failures == 0
        assert backoff.allows(now=NOON_UTC) is True
