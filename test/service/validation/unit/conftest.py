from pathlib import Path

import pytest

from src.service.validation.domain.value_object.sync_status import SyncState
from src.service.validation.domain.write_through_backoff import WriteThroughBackoff
from src.service.validation.driven_adapter.cache.local_ticket_cache_impl import (
    LocalTicketCacheImpl,
)
from test.service.validation.validation_fakes import (
    CACHE_FILE_NAME,
    FakeConnectivity,
    FixedClock,
)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / 'validator_state'


@pytest.fixture
def local_cache(cache_dir: Path, clock: FixedClock) -> LocalTicketCacheImpl:
    return LocalTicketCacheImpl(cache_dir=cache_dir, file_name=CACHE_FILE_NAME, clock=clock)


@pytest.fixture
def connectivity() -> FakeConnectivity:
    return FakeConnectivity(online=True)


@pytest.fixture
def sync_state() -> SyncState:
    return SyncState()


@pytest.fixture
def backoff() -> WriteThroughBackoff:
    return WriteThroughBackoff(base_seconds=5, max_seconds=120)
