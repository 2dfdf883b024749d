from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.service.validation.domain.entity.cached_ticket_entity import CachedTicket
from src.service.validation.domain.value_object.sync_status import SyncReport, SyncStatus
from src.service.validation.domain.value_object.validation_result import ValidationResult


class ValidateTicketRequest(BaseModel):
    code: str = Field(min_length=1)
    validator_id: Optional[str] = None  # defaults to the device's VALIDATOR_ID

    model_config = ConfigDict(
        json_schema_extra={'example': {'code': 'T-001', 'validator_id': 'gateA'}}
    )


class TicketResponse(BaseModel):
    id: str
    ticket_number: str
    qr_code: str
    status: str
    customer_name: str
    customer_email: str
    customer_cpf: str
    event_name: str
    session_date: Optional[date] = None
    ticket_type: str
    unit_price: Decimal
    used_at: Optional[datetime] = None
    validated_by: Optional[str] = None
    validation_method: Optional[str] = None
    needs_sync: bool
    last_synced: Optional[datetime] = None

    @classmethod
    def from_entity(cls, ticket: CachedTicket) -> 'TicketResponse':
        return cls(
            id=ticket.id,
            ticket_number=ticket.ticket_number,
            qr_code=ticket.qr_code,
            status=ticket.status.value,
            customer_name=ticket.customer_name,
            customer_email=ticket.customer_email,
            customer_cpf=ticket.customer_cpf,
            event_name=ticket.event_name,
            session_date=ticket.session_date,
            ticket_type=ticket.ticket_type,
            unit_price=ticket.unit_price,
            used_at=ticket.used_at,
            validated_by=ticket.validated_by,
            validation_method=ticket.validation_method.value if ticket.validation_method else None,
            needs_sync=ticket.needs_sync,
            last_synced=ticket.last_synced,
        )


class ValidateTicketResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'accepted': False,
                'outcome': 'already_used',
                'message': 'Ticket already used',
                'ticket': None,
            }
        }
    )

    accepted: bool
    outcome: str
    message: str
    ticket: Optional[TicketResponse] = None

    @classmethod
    def from_result(cls, result: ValidationResult) -> 'ValidateTicketResponse':
        return cls(
            accepted=result.accepted,
            outcome=result.outcome.value,
            message=result.message,
            ticket=TicketResponse.from_entity(result.ticket) if result.ticket else None,
        )


class SyncStatusResponse(BaseModel):
    is_online: bool
    last_sync: Optional[datetime] = None
    total_tickets: int
    pending_sync: int
    sync_in_progress: bool
    operating_day: Optional[date] = None
    last_update: Optional[datetime] = None
    last_error: Optional[str] = None

    @classmethod
    def from_status(cls, status: SyncStatus) -> 'SyncStatusResponse':
        return cls(
            is_online=status.is_online,
            last_sync=status.last_sync,
            total_tickets=status.total_tickets,
            pending_sync=status.pending_sync,
            sync_in_progress=status.sync_in_progress,
            operating_day=status.operating_day,
            last_update=status.last_update,
            last_error=status.last_error,
        )


class SyncResponse(BaseModel):
    started: bool
    succeeded: bool = False
    fetched: int = 0
    kept_local: int = 0
    pushed: int = 0
    push_failed: int = 0
    error: Optional[str] = None

    @classmethod
    def from_report(cls, report: Optional[SyncReport]) -> 'SyncResponse':
        if report is None:
            return cls(started=False)
        return cls(
            started=True,
            succeeded=report.succeeded,
            fetched=report.fetched,
            kept_local=report.kept_local,
            pushed=report.pushed,
            push_failed=report.push_failed,
            error=report.error,
        )


class ConnectivityRequest(BaseModel):
    online: bool

    model_config = ConfigDict(json_schema_extra={'example': {'online': True}})


class ConnectivityResponse(BaseModel):
    is_online: bool


class TicketListResponse(BaseModel):
    total: int
    tickets: List[TicketResponse]


class ClearCacheResponse(BaseModel):
    cleared: int
