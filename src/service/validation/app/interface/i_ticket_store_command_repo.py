from abc import ABC, abstractmethod

from src.service.validation.domain.entity.cached_ticket_entity import CachedTicket
from src.service.validation.domain.enum.validation_outcome import WriteBackOutcome


class ITicketStoreCommandRepo(ABC):
    @abstractmethod
    async def write_back_validation(self, *, ticket: CachedTicket) -> WriteBackOutcome:
        """
        Write status/used_at/validated_by of a locally used ticket.

        The update is narrowed to the ticket's id; rows already used or
        cancelled on the store side are reported, not overwritten.

        Raises:
            TicketStoreError: store unreachable or write failed
        """
        pass
