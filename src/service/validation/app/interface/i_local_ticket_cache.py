"""
Local Ticket Cache Interface

Day-scoped, persisted snapshot of today's tickets. Every method is
synchronous: validation must decide using local data only, without a
suspension point between reading and persisting a ticket.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List, Optional

from src.service.validation.domain.entity.cached_ticket_entity import CachedTicket


class ILocalTicketCache(ABC):
    @abstractmethod
    def load(self) -> List[CachedTicket]:
        """
        Load the persisted set if it is tagged with today's date.

        A stale, missing or corrupt cache yields an empty list, never an error.
        """
        pass

    @abstractmethod
    def save(self, tickets: List[CachedTicket]) -> None:
        """Replace the whole persisted set, tagged with today's date."""
        pass

    @abstractmethod
    def find(self, code: str) -> Optional[CachedTicket]:
        """Resolve a code against qr_code or ticket_number."""
        pass

    @abstractmethod
    def get(self, ticket_id: str) -> Optional[CachedTicket]:
        pass

    @abstractmethod
    def all(self) -> List[CachedTicket]:
        pass

    @abstractmethod
    def pending(self) -> List[CachedTicket]:
        """Tickets whose local used transition is not yet acknowledged."""
        pass

    @abstractmethod
    def put(self, ticket: CachedTicket) -> None:
        """Replace one ticket by id and persist the full set."""
        pass

    @abstractmethod
    def mark_synced(self, *, ticket_id: str, used_at: Optional[datetime], at: datetime) -> bool:
        """
        Clear needs_sync once the store acknowledged the write.

        Only applies when the cached record still carries the acknowledged
        used_at. Returns True when the record was updated.
        """
        pass

    @abstractmethod
    def take_stale_pending(self) -> List[CachedTicket]:
        """Hand over unsynced tickets left behind by a day rollover."""
        pass

    @abstractmethod
    def restore_stale_pending(self, tickets: List[CachedTicket]) -> None:
        """Return carry-over tickets whose push failed."""
        pass

    @property
    @abstractmethod
    def stale_pending_count(self) -> int:
        pass

    @abstractmethod
    def clear(self) -> int:
        """Drop every synced ticket; unsynced validations stay. Returns the number dropped."""
        pass

    @property
    @abstractmethod
    def last_update(self) -> Optional[datetime]:
        pass

    @property
    @abstractmethod
    def operating_day(self) -> date:
        pass
