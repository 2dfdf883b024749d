"""
Unit tests for ValidateTicketUseCase

Test Coverage:
1. Rejections (unknown, cancelled, already used) never mutate state
2. Acceptance (local mutation persisted before any network call)
3. Offline acceptance
4. Write-through (success, failure, timeout, backoff window)
"""

from unittest.mock import AsyncMock

import anyio
import pytest

from src.platform.exception.exceptions import TicketStoreError
from src.service.validation.app.command.validate_ticket_use_case import ValidateTicketUseCase
from src.service.validation.domain.enum.ticket_status import TicketStatus
from src.service.validation.domain.enum.validation_outcome import (
    ValidationMethod,
    ValidationOutcome,
    WriteBackOutcome,
)
from src.service.validation.domain.value_object.validation_result import (
    ALREADY_USED_MESSAGE,
    NOT_FOUND_MESSAGE,
)
from test.service.validation.validation_fakes import make_ticket


pytestmark = pytest.mark.unit


@pytest.fixture
def command_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.write_back_validation.return_value = WriteBackOutcome.APPLIED
    return repo


@pytest.fixture
def use_case(local_cache, command_repo, connectivity, clock, backoff) -> ValidateTicketUseCase:
    local_cache.save(
        [
            make_ticket('T-001'),
            make_ticket('T-002'),
            make_ticket('T-003'),
            make_ticket('T-CANCELLED', status=TicketStatus.CANCELLED),
        ]
    )
    return ValidateTicketUseCase(
        local_cache=local_cache,
        ticket_store_command_repo=command_repo,
        connectivity=connectivity,
        clock=clock,
        backoff=backoff,
        write_through_timeout=0.5,
    )


class TestRejections:
    @pytest.mark.asyncio
    async def test_unknown_code_is_not_found(self, use_case, command_repo):
        result = await use_case.execute(code='NOPE', validator_id='gateA')

        assert result.accepted is False
        assert result.outcome == ValidationOutcome.NOT_FOUND
        assert result.message == NOT_FOUND_MESSAGE
        assert result.ticket is None
        command_repo.write_back_validation.assert_not_called()

    @pytest.mark.asyncio
    async def test_cancelled_ticket_answers_not_found(self, use_case, local_cache, command_repo):
        """Cancellation is not revealed at the gate"""
        result = await use_case.execute(code='T-CANCELLED', validator_id='gateA')

        assert result.outcome == ValidationOutcome.NOT_FOUND
        assert result.message == NOT_FOUND_MESSAGE
        assert local_cache.find('T-CANCELLED').status == TicketStatus.CANCELLED
        command_repo.write_back_validation.assert_not_called()

    @pytest.mark.asyncio
    async def test_second_scan_is_already_used(self, use_case, local_cache, command_repo):
        """At-most-once: the second validation of the same ticket is rejected"""
        # Given: The ticket was accepted once
        first = await use_case.execute(code='T-001', validator_id='gateA')
        used_at = local_cache.find('T-001').used_at

        # When: The same ticket is scanned again, by its QR code this time
        second = await use_case.execute(code='QR-T-001', validator_id='gateB')

        # Then: Rejected with the original validation untouched
        assert first.accepted is True
        assert second.accepted is False
        assert second.outcome == ValidationOutcome.ALREADY_USED
        assert second.message == ALREADY_USED_MESSAGE
        assert second.ticket is not None
        assert second.ticket.validated_by == 'gateA'
        stored = local_cache.find('T-001')
        assert stored.used_at == used_at
        assert stored.validated_by == 'gateA'
        assert command_repo.write_back_validation.await_count == 1


class TestAcceptance:
    @pytest.mark.asyncio
    async def test_accept_online_writes_through(self, use_case, local_cache, command_repo, clock):
        # When
        result = await use_case.execute(code='T-001', validator_id='gateA')

        # Then: Accepted and acknowledged by the store
        assert result.accepted is True
        assert result.outcome == ValidationOutcome.ACCEPTED
        assert result.ticket.status == TicketStatus.USED
        assert result.ticket.needs_sync is False

        stored = local_cache.find('T-001')
        assert stored.status == TicketStatus.USED
        assert stored.used_at == clock.now()
        assert stored.validated_by == 'gateA'
        assert stored.validation_method == ValidationMethod.TICKET_NUMBER
        assert stored.needs_sync is False
        assert stored.last_synced == clock.now()

        written = command_repo.write_back_validation.await_args.kwargs['ticket']
        assert written.status == TicketStatus.USED
        assert written.validated_by == 'gateA'

    @pytest.mark.asyncio
    async def test_accept_by_qr_code_records_method(self, use_case, local_cache):
        await use_case.execute(code='QR-T-002', validator_id='gateA')

        assert local_cache.find('T-002').validation_method == ValidationMethod.QR_CODE

    @pytest.mark.asyncio
    async def test_local_state_is_persisted_before_write_through(
        self, use_case, local_cache, command_repo
    ):
        """An immediate second scan must see the used state even while the write is in flight"""
        seen = {}

        async def inspect_cache(*, ticket):
            stored = local_cache.find(ticket.ticket_number)
            seen['status'] = stored.status
            seen['needs_sync'] = stored.needs_sync
            return WriteBackOutcome.APPLIED

        command_repo.write_back_validation.side_effect = inspect_cache

        await use_case.execute(code='T-001', validator_id='gateA')

        assert seen == {'status': TicketStatus.USED, 'needs_sync': True}

    @pytest.mark.asyncio
    async def test_offline_acceptance(self, use_case, local_cache, command_repo, connectivity):
        """Offline: accepted from local data only, left for the sync engine"""
        # Given
        connectivity.online = False

        # When
        result = await use_case.execute(code='T-001', validator_id='gateA')

        # Then
        assert result.accepted is True
        assert local_cache.find('T-001').needs_sync is True
        assert [ticket.ticket_number for ticket in local_cache.pending()] == ['T-001']
        command_repo.write_back_validation.assert_not_called()

    @pytest.mark.asyncio
    async def test_store_side_rejection_still_acknowledges(
        self, use_case, local_cache, command_repo
    ):
        """A store that already saw the ticket used still closes the local bookkeeping"""
        command_repo.write_back_validation.return_value = WriteBackOutcome.ALREADY_USED

        result = await use_case.execute(code='T-001', validator_id='gateA')

        assert result.accepted is True
        assert local_cache.find('T-001').needs_sync is False


class TestWriteThroughFailure:
    @pytest.mark.asyncio
    async def test_failure_keeps_acceptance_and_needs_sync(
        self, use_case, local_cache, command_repo, backoff
    ):
        # Given: The store is unreachable
        command_repo.write_back_validation.side_effect = TicketStoreError('connection refused')

        # When
        result = await use_case.execute(code='T-001', validator_id='gateA')

        # Then: Passage granted, bookkeeping deferred
        assert result.accepted is True
        assert result.ticket.needs_sync is True
        assert local_cache.find('T-001').needs_sync is True
        assert backoff.failures == 1

    @pytest.mark.asyncio
    async def test_timeout_is_treated_as_failure(self, use_case, local_cache, command_repo):
        use_case.write_through_timeout = 0.01

        async def hang(**_kwargs):
            await anyio.sleep(1)

        command_repo.write_back_validation.side_effect = hang

        result = await use_case.execute(code='T-001', validator_id='gateA')

        assert result.accepted is True
        assert local_cache.find('T-001').needs_sync is True

    @pytest.mark.asyncio
    async def test_backoff_window_skips_write_through(
        self, use_case, local_cache, command_repo, clock, backoff
    ):
        """After a failure, write-through is skipped until the backoff window passes"""
        # Given: One failed write-through
        command_repo.write_back_validation.side_effect = TicketStoreError('down')
        await use_case.execute(code='T-001', validator_id='gateA')
        command_repo.write_back_validation.reset_mock(side_effect=True)
        command_repo.write_back_validation.return_value = WriteBackOutcome.APPLIED

        # When: Another ticket is accepted inside the window
        clock.advance(seconds=2)
        await use_case.execute(code='T-002', validator_id='gateA')

        # Then: No network attempt
        command_repo.write_back_validation.assert_not_called()
        assert local_cache.find('T-002').needs_sync is True

        # When: The window has passed
        clock.advance(seconds=4)
        await use_case.execute(code='T-003', validator_id='gateA')

        # Then: Write-through resumes and the backoff resets
        command_repo.write_back_validation.assert_awaited_once()
        assert local_cache.find('T-003').needs_sync is False
        assert backoff.failures == 0
