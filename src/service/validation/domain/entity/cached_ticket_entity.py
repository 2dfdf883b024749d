from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.validation.domain.enum.ticket_status import TicketStatus
from src.service.validation.domain.enum.validation_outcome import ValidationMethod


@attrs.define
class CachedTicket:
    """
    Device-local copy of a ticket for the current operating day.

    Display fields (customer, event, type, price) are refreshed from the
    Ticket Store and never mutated here. The only local transition is
    VALID -> USED, together with the sync bookkeeping fields.
    """

    id: str
    ticket_number: str
    qr_code: str
    status: TicketStatus
    customer_name: str = ''
    customer_email: str = ''
    customer_cpf: str = ''
    event_name: str = ''
    session_date: Optional[date] = None
    ticket_type: str = ''
    unit_price: Decimal = Decimal('0')
    used_at: Optional[datetime] = None
    validated_by: Optional[str] = None
    validation_method: Optional[ValidationMethod] = None
    needs_sync: bool = False
    last_synced: Optional[datetime] = None

    def matched_by(self, code: str) -> ValidationMethod | None:
        if self.qr_code == code:
            return ValidationMethod.QR_CODE
        if self.ticket_number == code:
            return ValidationMethod.TICKET_NUMBER
        return None

    @Logger.io
    def mark_used(
        self, *, validated_by: str, validation_method: ValidationMethod, at: datetime
    ) -> None:
        if self.status != TicketStatus.VALID:
            raise DomainError(f'Cannot use ticket with status {self.status}')

        self.status = TicketStatus.USED
        self.used_at = at
        self.validated_by = validated_by
        self.validation_method = validation_method
        # Cleared only once the Ticket Store acknowledges the write
        self.needs_sync = True

    def mark_synced(self, *, at: datetime) -> None:
        self.needs_sync = False
        self.last_synced = at

    def copy(self) -> 'CachedTicket':
        return attrs.evolve(self)
