from enum import StrEnum


class ValidationOutcome(StrEnum):
    ACCEPTED = 'accepted'
    NOT_FOUND = 'not_found'
    ALREADY_USED = 'already_used'


class ValidationMethod(StrEnum):
    QR_CODE = 'qr_code'
    TICKET_NUMBER = 'ticket_number'


class WriteBackOutcome(StrEnum):
    """How the Ticket Store answered a used-ticket write-back."""

    APPLIED = 'applied'
    ALREADY_USED = 'already_used'  # Another device reached the store first
    CANCELLED = 'cancelled'
    MISSING = 'missing'
