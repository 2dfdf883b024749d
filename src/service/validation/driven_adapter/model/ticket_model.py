from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.orm_db_setting import Base


if TYPE_CHECKING:
    from src.service.validation.driven_adapter.model.order_model import OrderItemModel


class TicketModel(Base):
    __tablename__ = 'tickets'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    ticket_number: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    qr_code: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    status: Mapped[str] = mapped_column(String(20), default='valid', nullable=False)
    used_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    validated_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    order_item_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('order_items.id'), nullable=False, index=True
    )

    order_item: Mapped['OrderItemModel'] = relationship('OrderItemModel', viewonly=True)


class ValidationModel(Base):
    """Append-only log of gate validations acknowledged by the store."""

    __tablename__ = 'validations'

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    ticket_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('tickets.id'), nullable=False, index=True
    )
    validation_method: Mapped[str] = mapped_column(String(20), nullable=False)
    validator_user: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    validated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
