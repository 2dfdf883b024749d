"""Validation Domain Enums"""

from src.service.validation.domain.enum.ticket_status import TicketStatus
from src.service.validation.domain.enum.validation_outcome import (
    ValidationMethod,
    ValidationOutcome,
    WriteBackOutcome,
)

__all__ = ['TicketStatus', 'ValidationMethod', 'ValidationOutcome', 'WriteBackOutcome']
