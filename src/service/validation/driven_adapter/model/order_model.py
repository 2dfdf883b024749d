from decimal import Decimal
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlalchemy import ForeignKey, Numeric, String
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.orm_db_setting import Base


if TYPE_CHECKING:
    from src.service.validation.driven_adapter.model.event_model import (
        EventSessionModel,
        TicketTypeModel,
    )


class OrderModel(Base):
    __tablename__ = 'orders'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_cpf: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    payment_status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    session_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('event_sessions.id'), nullable=False, index=True
    )

    session: Mapped['EventSessionModel'] = relationship('EventSessionModel', viewonly=True)


class OrderItemModel(Base):
    __tablename__ = 'order_items'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    order_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('orders.id'), nullable=False, index=True
    )
    ticket_type_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('ticket_types.id'), nullable=False
    )
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    order: Mapped['OrderModel'] = relationship('OrderModel', viewonly=True)
    ticket_type: Mapped['TicketTypeModel'] = relationship('TicketTypeModel', viewonly=True)
