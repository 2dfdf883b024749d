from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.validation.app.interface.i_local_ticket_cache import ILocalTicketCache
from src.service.validation.domain.entity.cached_ticket_entity import CachedTicket


class SearchTicketsUseCase:
    def __init__(self, *, local_cache: ILocalTicketCache) -> None:
        self.local_cache = local_cache

    @classmethod
    @inject
    def depends(
        cls,
        local_cache: ILocalTicketCache = Depends(Provide[Container.local_ticket_cache]),
    ) -> Self:
        return cls(local_cache=local_cache)

    @staticmethod
    def _matches(ticket: CachedTicket, term: str) -> bool:
        return any(
            term in field.lower()
            for field in (
                ticket.customer_name,
                ticket.customer_email,
                ticket.customer_cpf,
                ticket.ticket_number,
            )
        )

    @Logger.io(truncate=True)
    async def execute(self, *, query: str = '') -> List[CachedTicket]:
        """
        Search today's cached tickets by customer name, email, CPF or ticket number.

        Case-insensitive substring match; an empty query lists everything.
        """
        tickets = self.local_cache.all()
        term = query.strip().lower()
        if not term:
            return tickets
        return [ticket for ticket in tickets if self._matches(ticket, term)]
