import pytest

from src.platform.exception.exceptions import DomainError
from src.service.validation.domain.enum.ticket_status import TicketStatus
from src.service.validation.domain.enum.validation_outcome import ValidationMethod
from test.service.validation.validation_fakes import NOON_UTC, make_ticket, make_used_ticket


pytestmark = pytest.mark.unit


class TestCachedTicket:
    def test_matched_by(self):
        ticket = make_ticket('T-001')

        assert ticket.matched_by('QR-T-001') == ValidationMethod.QR_CODE
        assert ticket.matched_by('T-001') == ValidationMethod.TICKET_NUMBER
        assert ticket.matched_by('T-002') is None

    def test_mark_used_sets_validation_fields(self):
        ticket = make_ticket('T-001')

        ticket.mark_used(
            validated_by='gateA', validation_method=ValidationMethod.QR_CODE, at=NOON_UTC
        )

        assert ticket.status == TicketStatus.USED
        assert ticket.used_at == NOON_UTC
        assert ticket.validated_by == 'gateA'
        assert ticket.validation_method == ValidationMethod.QR_CODE
        assert ticket.needs_sync is True

    @pytest.mark.parametrize('status', [TicketStatus.USED, TicketStatus.CANCELLED])
    def test_mark_used_only_from_valid(self, status):
        """The used transition happens at most once"""
        ticket = make_ticket('T-001', status=status)

        with pytest.raises(DomainError):
            ticket.mark_used(
                validated_by='gateA', validation_method=ValidationMethod.QR_CODE, at=NOON_UTC
            )

        assert ticket.used_at is None

    def test_mark_synced(self):
        ticket = make_used_ticket('T-001')

        ticket.mark_synced(at=NOON_UTC)

        assert ticket.needs_sync is False
        assert ticket.last_synced == NOON_UTC
        assert ticket.status == TicketStatus.USED

    def test_copy_is_independent(self):
        ticket = make_ticket('T-001')

        clone = ticket.copy()
        clone.status = TicketStatus.USED

        assert ticket.status == TicketStatus.VALID
