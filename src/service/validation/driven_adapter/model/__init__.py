"""
Ticket Store Models

Read-side projection of the platform's tables the validator touches.
Import all models here to ensure they are registered with SQLAlchemy.
"""

from src.service.validation.driven_adapter.model.event_model import (
    EventModel,
    EventSessionModel,
    TicketTypeModel,
)
from src.service.validation.driven_adapter.model.order_model import OrderItemModel, OrderModel
from src.service.validation.driven_adapter.model.ticket_model import TicketModel, ValidationModel

__all__ = [
    'EventModel',
    'EventSessionModel',
    'OrderItemModel',
    'OrderModel',
    'TicketModel',
    'TicketTypeModel',
    'ValidationModel',
]
