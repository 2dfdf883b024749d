from enum import StrEnum


class TicketStatus(StrEnum):
    VALID = 'valid'
    USED = 'used'
    CANCELLED = 'cancelled'  # Only ever set by the Ticket Store (refund/admin)
