"""
Unit tests for TicketStoreCommandRepoImpl guard paths

Row-level behaviour runs against PostgreSQL; these cover what is decided
before a session is opened and how store failures surface.
"""

from contextlib import asynccontextmanager
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.platform.exception.exceptions import TicketStoreError
from src.service.validation.domain.enum.validation_outcome import WriteBackOutcome
from src.service.validation.driven_adapter.repo.ticket_store_command_repo_impl import (
    TicketStoreCommandRepoImpl,
)
from test.service.validation.validation_fakes import make_ticket, make_used_ticket


pytestmark = pytest.mark.unit

TICKET_UUID = '0190a0b4-7c1e-7b3a-9f00-5b8c2d3e4f51'


def _failing_session_factory():
    @asynccontextmanager
    async def session():
        raise OperationalError('SELECT 1', {}, Exception('connection refused'))
        yield  # pragma: no cover

    return session


class TestWriteBackGuards:
    @pytest.mark.asyncio
    async def test_requires_a_local_validation(self):
        repo = TicketStoreCommandRepoImpl(session_factory=MagicMock())

        with pytest.raises(ValueError):
            await repo.write_back_validation(ticket=make_ticket('T-001', id=TICKET_UUID))

    @pytest.mark.asyncio
    async def test_non_uuid_id_is_missing(self):
        session_factory = MagicMock()
        repo = TicketStoreCommandRepoImpl(session_factory=session_factory)

        outcome = await repo.write_back_validation(ticket=make_used_ticket('T-001'))

        assert outcome == WriteBackOutcome.MISSING
        session_factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_store_failure_raises_ticket_store_error(self):
        repo = TicketStoreCommandRepoImpl(session_factory=_failing_session_factory())

        with pytest.raises(TicketStoreError):
            await repo.write_back_validation(ticket=make_used_ticket('T-001', id=TICKET_UUID))
