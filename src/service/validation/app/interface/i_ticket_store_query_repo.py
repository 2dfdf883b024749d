from abc import ABC, abstractmethod
from datetime import date
from typing import List

from src.service.validation.domain.entity.cached_ticket_entity import CachedTicket


class ITicketStoreQueryRepo(ABC):
    @abstractmethod
    async def list_paid_tickets_for_day(self, *, session_date: date) -> List[CachedTicket]:
        """
        Fetch every ticket of a paid order whose session falls on session_date,
        with the denormalized display fields filled in.

        Raises:
            TicketStoreError: store unreachable or query failed
        """
        pass
