from typing import Optional

import attrs

from src.service.validation.domain.entity.cached_ticket_entity import CachedTicket
from src.service.validation.domain.enum.validation_outcome import ValidationOutcome


ACCEPTED_MESSAGE = 'Ticket validated successfully'
NOT_FOUND_MESSAGE = "Ticket not found in today's ticket set"
ALREADY_USED_MESSAGE = 'Ticket already used'


@attrs.frozen
class ValidationResult:
    outcome: ValidationOutcome
    message: str
    ticket: Optional[CachedTicket] = None

    @property
    def accepted(self) -> bool:
        return self.outcome == ValidationOutcome.ACCEPTED

    @classmethod
    def accept(cls, *, ticket: CachedTicket) -> 'ValidationResult':
        return cls(outcome=ValidationOutcome.ACCEPTED, message=ACCEPTED_MESSAGE, ticket=ticket)

    @classmethod
    def not_found(cls) -> 'ValidationResult':
        return cls(outcome=ValidationOutcome.NOT_FOUND, message=NOT_FOUND_MESSAGE)

    @classmethod
    def already_used(cls, *, ticket: CachedTicket) -> 'ValidationResult':
        return cls(
            outcome=ValidationOutcome.ALREADY_USED, message=ALREADY_USED_MESSAGE, ticket=ticket
        )
