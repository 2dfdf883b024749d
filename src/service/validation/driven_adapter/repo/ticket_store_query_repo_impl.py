from contextlib import AbstractAsyncContextManager
from datetime import date
from decimal import Decimal
from typing import Any, Callable, List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import TicketStoreError
from src.platform.logging.loguru_io import Logger
from src.service.validation.app.interface.i_ticket_store_query_repo import ITicketStoreQueryRepo
from src.service.validation.domain.entity.cached_ticket_entity import CachedTicket
from src.service.validation.domain.enum.ticket_status import TicketStatus
from src.service.validation.driven_adapter.model import (
    EventModel,
    EventSessionModel,
    OrderItemModel,
    OrderModel,
    TicketModel,
    TicketTypeModel,
)


PAID = 'paid'


class TicketStoreQueryRepoImpl(ITicketStoreQueryRepo):
    def __init__(
        self, *, session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]]
    ) -> None:
        self.session_factory = session_factory

    @staticmethod
    def _to_entity(row: Any) -> CachedTicket:
        return CachedTicket(
            id=str(row.id),
            ticket_number=row.ticket_number,
            qr_code=row.qr_code,
            status=TicketStatus(row.status),
            customer_name=row.customer_name or '',
            customer_email=row.customer_email or '',
            customer_cpf=row.customer_cpf or '',
            event_name=row.event_name or '',
            session_date=row.session_date,
            ticket_type=row.ticket_type or '',
            unit_price=Decimal(row.unit_price) if row.unit_price is not None else Decimal('0'),
            used_at=row.used_at,
            validated_by=row.validated_by,
        )

    @Logger.io(truncate=True)
    async def list_paid_tickets_for_day(self, *, session_date: date) -> List[CachedTicket]:
        query = (
            select(
                TicketModel.id,
                TicketModel.ticket_number,
                TicketModel.qr_code,
                TicketModel.status,
                TicketModel.used_at,
                TicketModel.validated_by,
                OrderModel.customer_name,
                OrderModel.customer_email,
                OrderModel.customer_cpf,
                EventModel.name.label('event_name'),
                EventSessionModel.session_date,
                TicketTypeModel.name.label('ticket_type'),
                OrderItemModel.unit_price,
            )
            .join(OrderItemModel, TicketModel.order_item_id == OrderItemModel.id)
            .join(OrderModel, OrderItemModel.order_id == OrderModel.id)
            .join(EventSessionModel, OrderModel.session_id == EventSessionModel.id)
            .join(EventModel, EventSessionModel.event_id == EventModel.id)
            .join(TicketTypeModel, OrderItemModel.ticket_type_id == TicketTypeModel.id)
            .where(EventSessionModel.session_date == session_date)
            .where(OrderModel.payment_status == PAID)
            .order_by(TicketModel.ticket_number)
        )

        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                rows = result.all()
        except (SQLAlchemyError, OSError) as e:
            raise TicketStoreError(f'Failed to fetch tickets for {session_date}: {e}') from e

        return [self._to_entity(row) for row in rows]
