from contextlib import AbstractAsyncContextManager
from typing import Callable
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import uuid_utils

from src.platform.exception.exceptions import TicketStoreError
from src.platform.logging.loguru_io import Logger
from src.service.validation.app.interface.i_ticket_store_command_repo import (
    ITicketStoreCommandRepo,
)
from src.service.validation.domain.entity.cached_ticket_entity import CachedTicket
from src.service.validation.domain.enum.ticket_status import TicketStatus
from src.service.validation.domain.enum.validation_outcome import (
    ValidationMethod,
    WriteBackOutcome,
)
from src.service.validation.driven_adapter.model import TicketModel, ValidationModel


class TicketStoreCommandRepoImpl(ITicketStoreCommandRepo):
    def __init__(
        self, *, session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]]
    ) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def write_back_validation(self, *, ticket: CachedTicket) -> WriteBackOutcome:
        if ticket.status != TicketStatus.USED or ticket.used_at is None:
            raise ValueError(f'Ticket {ticket.id} has no local validation to write back')

        try:
            ticket_id = UUID(ticket.id)
        except ValueError:
            return WriteBackOutcome.MISSING

        try:
            async with self.session_factory() as session:
                async with session.begin():
                    return await self._write_back(session, ticket_id=ticket_id, ticket=ticket)
        except (SQLAlchemyError, OSError) as e:
            raise TicketStoreError(f'Failed to write back ticket {ticket.id}: {e}') from e

    async def _write_back(
        self, session: AsyncSession, *, ticket_id: UUID, ticket: CachedTicket
    ) -> WriteBackOutcome:
        result = await session.execute(
            select(TicketModel.status, TicketModel.used_at, TicketModel.validated_by)
            .where(TicketModel.id == ticket_id)
            .with_for_update()
        )
        row = result.one_or_none()
        if row is None:
            return WriteBackOutcome.MISSING

        if row.status == TicketStatus.CANCELLED:
            return WriteBackOutcome.CANCELLED

        if row.status == TicketStatus.USED:
            # A retry after a lost acknowledgement finds its own write
            if row.used_at == ticket.used_at and row.validated_by == ticket.validated_by:
                return WriteBackOutcome.APPLIED
            return WriteBackOutcome.ALREADY_USED

        await session.execute(
            update(TicketModel)
            .where(TicketModel.id == ticket_id)
            .where(TicketModel.status == TicketStatus.VALID)
            .values(
                status=TicketStatus.USED.value,
                used_at=ticket.used_at,
                validated_by=ticket.validated_by,
            )
        )
        validation_method = ticket.validation_method or ValidationMethod.QR_CODE
        session.add(
            ValidationModel(
                id=UUID(str(uuid_utils.uuid7())),
                ticket_id=ticket_id,
                validation_method=validation_method.value,
                validator_user=ticket.validated_by or '',
                notes=f'Validated at gate {ticket.validated_by}',
                validated_at=ticket.used_at,
            )
        )
        return WriteBackOutcome.APPLIED
