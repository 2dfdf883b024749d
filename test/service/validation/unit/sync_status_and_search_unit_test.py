import pytest

from src.service.validation.app.command.clear_cache_use_case import ClearCacheUseCase
from src.service.validation.app.query.get_sync_status_use_case import GetSyncStatusUseCase
from src.service.validation.app.query.search_tickets_use_case import SearchTicketsUseCase
from test.service.validation.validation_fakes import OPERATING_DAY, make_ticket, make_used_ticket


pytestmark = pytest.mark.unit


class TestGetSyncStatus:
    @pytest.mark.asyncio
    async def test_reports_counts_and_flags(self, local_cache, connectivity, sync_state, clock):
        # Given: One pending validation today and one carried over from yesterday
        local_cache.save([make_used_ticket('T-001'), make_ticket('T-002'), make_ticket('T-003')])
        local_cache.restore_stale_pending([make_used_ticket('Y-001')])
        connectivity.online = False
        sync_state.last_sync = clock.now()
        sync_state.last_error = 'TicketStoreError: down'

        # When
        status = await GetSyncStatusUseCase(
            local_cache=local_cache, connectivity=connectivity, sync_state=sync_state
        ).execute()

        # Then
        assert status.is_online is False
        assert status.total_tickets == 3
        assert status.pending_sync == 2
        assert status.last_sync == clock.now()
        assert status.operating_day == OPERATING_DAY
        assert status.last_update == clock.now()
        assert status.last_error == 'TicketStoreError: down'

    @pytest.mark.asyncio
    async def test_empty_cache(self, local_cache, connectivity, sync_state):
        status = await GetSyncStatusUseCase(
            local_cache=local_cache, connectivity=connectivity, sync_state=sync_state
        ).execute()

        assert (status.total_tickets, status.pending_sync, status.last_sync) == (0, 0, None)


class TestSearchTickets:
    @pytest.fixture
    def use_case(self, local_cache) -> SearchTicketsUseCase:
        local_cache.save(
            [
                make_ticket('T-001', customer_name='Maria Silva', customer_cpf='111.222.333-44'),
                make_ticket('T-002', customer_name='Joao Souza', customer_email='joao@x.com'),
            ]
        )
        return SearchTicketsUseCase(local_cache=local_cache)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'query, expected',
        [
            ('silva', ['T-001']),
            ('JOAO@X', ['T-002']),
            ('222.333', ['T-001']),
            ('t-00', ['T-001', 'T-002']),
            ('  ', ['T-001', 'T-002']),
            ('nobody', []),
        ],
    )
    async def test_filters_case_insensitively(self, use_case, query, expected):
        tickets = await use_case.execute(query=query)

        assert sorted(ticket.ticket_number for ticket in tickets) == expected


class TestClearCache:
    @pytest.mark.asyncio
    async def test_clear_resets_last_sync(self, local_cache, sync_state, clock):
        local_cache.save([make_ticket('T-001')])
        sync_state.last_sync = clock.now()

        cleared = await ClearCacheUseCase(local_cache=local_cache, sync_state=sync_state).execute()

        assert cleared == 1
        assert local_cache.all() == []
        assert sync_state.last_sync is None
