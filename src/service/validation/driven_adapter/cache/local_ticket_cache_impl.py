"""
Local Ticket Cache - JSON file on device storage

Persisted layout (one record under a fixed file name):
    {"tickets": [...], "lastUpdate": "<ISO-8601>", "date": "YYYY-MM-DD"}

The in-memory set is the working copy; every mutation rewrites the whole file
through a temp file + os.replace so a crash never leaves a half-written cache.
"""

from datetime import date, datetime
from decimal import Decimal
import os
from pathlib import Path
from typing import Any, List, Optional

import attrs
import orjson

from src.platform.clock.operating_clock import OperatingClock
from src.platform.logging.loguru_io import Logger
from src.service.validation.app.interface.i_local_ticket_cache import ILocalTicketCache
from src.service.validation.domain.entity.cached_ticket_entity import CachedTicket
from src.service.validation.domain.enum.ticket_status import TicketStatus
from src.service.validation.domain.enum.validation_outcome import ValidationMethod


def _encode_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f'Type is not JSON serializable: {type(value).__name__}')


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class LocalTicketCacheImpl(ILocalTicketCache):
    def __init__(self, *, cache_dir: Path, file_name: str, clock: OperatingClock) -> None:
        self._path = Path(cache_dir) / file_name
        self._clock = clock
        self._day: date = clock.today()
        self._tickets: dict[str, CachedTicket] = {}
        self._index: dict[str, str] = {}
        self._last_update: Optional[datetime] = None
        self._stale_pending: List[CachedTicket] = []

    @property
    def path(self) -> Path:
        return self._path

    @property
    def last_update(self) -> Optional[datetime]:
        return self._last_update

    @property
    def operating_day(self) -> date:
        return self._day

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @Logger.io
    def load(self) -> List[CachedTicket]:
        self._day = self._clock.today()
        self._replace([])
        self._last_update = None

        payload = self._read_file()
        if payload is None:
            return []

        try:
            tickets = [self._decode(item) for item in payload.get('tickets') or []]
            last_update = _parse_datetime(payload.get('lastUpdate'))
        except (KeyError, TypeError, ValueError) as e:
            Logger.base.warning(f'⚠️ [CACHE] Corrupt ticket records in {self._path}: {e}')
            return []

        if payload.get('date') != self._day.isoformat():
            stale = [ticket for ticket in tickets if ticket.needs_sync]
            if stale:
                Logger.base.warning(
                    f'⚠️ [CACHE] {len(stale)} unsynced validations from {payload.get("date")} '
                    'kept for push only'
                )
                self._stale_pending.extend(stale)
            Logger.base.info(f'🗑️ [CACHE] Discarding cache tagged {payload.get("date")}')
            self._discard_file()
            return []

        self._replace(tickets)
        self._last_update = last_update
        Logger.base.info(f'💾 [CACHE] Loaded {len(tickets)} tickets for {self._day}')
        return self.all()

    def save(self, tickets: List[CachedTicket]) -> None:
        self._roll_over_if_stale()
        self._replace([ticket.copy() for ticket in tickets])
        self._persist()

    def _persist(self) -> None:
        self._last_update = self._clock.now()
        payload = {
            'tickets': [attrs.asdict(ticket) for ticket in self._tickets.values()],
            'lastUpdate': self._last_update.isoformat(),
            'date': self._day.isoformat(),
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_name(f'{self._path.name}.tmp')
            tmp_path.write_bytes(orjson.dumps(payload, default=_encode_value))
            os.replace(tmp_path, self._path)
        except OSError as e:
            # In-memory state stays authoritative for this process
            Logger.base.error(f'❌ [CACHE] Failed to persist {self._path}: {e}')

    def _read_file(self) -> Optional[dict[str, Any]]:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            Logger.base.warning(f'⚠️ [CACHE] Cannot read {self._path}: {e}')
            return None

        try:
            payload = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            Logger.base.warning(f'⚠️ [CACHE] Corrupt cache file {self._path}: {e}')
            return None

        if not isinstance(payload, dict):
            Logger.base.warning(f'⚠️ [CACHE] Unexpected cache layout in {self._path}')
            return None
        return payload

    def _discard_file(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            Logger.base.warning(f'⚠️ [CACHE] Failed to remove {self._path}: {e}')

    @staticmethod
    def _decode(item: dict[str, Any]) -> CachedTicket:
        session_date = item.get('session_date')
        validation_method = item.get('validation_method')
        return CachedTicket(
            id=str(item['id']),
            ticket_number=str(item['ticket_number']),
            qr_code=str(item['qr_code']),
            status=TicketStatus(item['status']),
            customer_name=item.get('customer_name') or '',
            customer_email=item.get('customer_email') or '',
            customer_cpf=item.get('customer_cpf') or '',
            event_name=item.get('event_name') or '',
            session_date=date.fromisoformat(session_date) if session_date else None,
            ticket_type=item.get('ticket_type') or '',
            unit_price=Decimal(str(item.get('unit_price') or '0')),
            used_at=_parse_datetime(item.get('used_at')),
            validated_by=item.get('validated_by'),
            validation_method=ValidationMethod(validation_method) if validation_method else None,
            needs_sync=bool(item.get('needs_sync', False)),
            last_synced=_parse_datetime(item.get('last_synced')),
        )

    # ------------------------------------------------------------------
    # Day scope
    # ------------------------------------------------------------------

    def _roll_over_if_stale(self) -> None:
        today = self._clock.today()
        if today == self._day:
            return

        stale = [ticket for ticket in self._tickets.values() if ticket.needs_sync]
        Logger.base.info(
            f'🌅 [CACHE] Operating day changed {self._day} -> {today}, '
            f'dropping {len(self._tickets)} tickets ({len(stale)} unsynced kept for push)'
        )
        self._stale_pending.extend(stale)
        self._day = today
        self._replace([])
        self._last_update = None
        self._discard_file()

    def take_stale_pending(self) -> List[CachedTicket]:
        self._roll_over_if_stale()
        stale, self._stale_pending = self._stale_pending, []
        return stale

    def restore_stale_pending(self, tickets: List[CachedTicket]) -> None:
        self._stale_pending.extend(tickets)

    @property
    def stale_pending_count(self) -> int:
        return len(self._stale_pending)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _replace(self, tickets: List[CachedTicket]) -> None:
        self._tickets = {ticket.id: ticket for ticket in tickets}
        self._reindex()

    def _reindex(self) -> None:
        index: dict[str, str] = {ticket.qr_code: ticket.id for ticket in self._tickets.values()}
        for ticket in self._tickets.values():
            owner = index.setdefault(ticket.ticket_number, ticket.id)
            if owner != ticket.id:
                Logger.base.warning(
                    f'⚠️ [CACHE] ticket_number {ticket.ticket_number} of {ticket.id} '
                    f'collides with a code of {owner}; {owner} wins'
                )
        self._index = index

    def find(self, code: str) -> Optional[CachedTicket]:
        self._roll_over_if_stale()
        ticket_id = self._index.get(code)
        return self._tickets[ticket_id].copy() if ticket_id is not None else None

    def get(self, ticket_id: str) -> Optional[CachedTicket]:
        self._roll_over_if_stale()
        ticket = self._tickets.get(ticket_id)
        return ticket.copy() if ticket else None

    def all(self) -> List[CachedTicket]:
        self._roll_over_if_stale()
        return [ticket.copy() for ticket in self._tickets.values()]

    def pending(self) -> List[CachedTicket]:
        self._roll_over_if_stale()
        return [ticket.copy() for ticket in self._tickets.values() if ticket.needs_sync]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def put(self, ticket: CachedTicket) -> None:
        self._roll_over_if_stale()
        is_new = ticket.id not in self._tickets
        self._tickets[ticket.id] = ticket.copy()
        if is_new:
            self._reindex()
        self._persist()

    def mark_synced(self, *, ticket_id: str, used_at: Optional[datetime], at: datetime) -> bool:
        self._roll_over_if_stale()
        ticket = self._tickets.get(ticket_id)
        if ticket is None or not ticket.needs_sync or ticket.used_at != used_at:
            return False
        ticket.mark_synced(at=at)
        self._persist()
        return True

    @Logger.io
    def clear(self) -> int:
        self._roll_over_if_stale()
        # Unsynced validations stay findable so a re-scan is still rejected
        pending = [ticket for ticket in self._tickets.values() if ticket.needs_sync]
        dropped = len(self._tickets) - len(pending)
        self._replace(pending)
        if pending:
            Logger.base.warning(
                f'⚠️ [CACHE] Clearing cache, {len(pending)} unsynced validations kept'
            )
            self._persist()
        else:
            self._last_update = None
            self._discard_file()
        return dropped
