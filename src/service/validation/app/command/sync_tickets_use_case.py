"""
Sync Engine - keeps the Local Cache eventually consistent with the Ticket Store

pull():
1. Fetch today's tickets of paid orders from the store (bounded by a timeout)
2. Merge by id: a cached copy with needs_sync wins, otherwise the server copy
   wins (external cancellations and corrections arrive this way)
3. Save the merged set and stamp last_sync
4. Push pending validations right away if any remain

push_pending():
- Write every needs_sync ticket back, one at a time; failures are independent
  per ticket and simply wait for the next cycle

pull and push share one lock. A cycle requested while another is running is
skipped, not queued: the running cycle already covers it and the timer or the
next reconnect starts a fresh one.
"""

from datetime import datetime
from typing import List, Optional

import anyio

from src.platform.clock.operating_clock import OperatingClock
from src.platform.logging.loguru_io import Logger
from src.service.validation.app.interface.i_connectivity_monitor import IConnectivityMonitor
from src.service.validation.app.interface.i_local_ticket_cache import ILocalTicketCache
from src.service.validation.app.interface.i_ticket_store_command_repo import (
    ITicketStoreCommandRepo,
)
from src.service.validation.app.interface.i_ticket_store_query_repo import ITicketStoreQueryRepo
from src.service.validation.domain.entity.cached_ticket_entity import CachedTicket
from src.service.validation.domain.enum.validation_outcome import WriteBackOutcome
from src.service.validation.domain.value_object.sync_status import SyncReport, SyncState


class SyncTicketsUseCase:
    def __init__(
        self,
        *,
        local_cache: ILocalTicketCache,
        ticket_store_query_repo: ITicketStoreQueryRepo,
        ticket_store_command_repo: ITicketStoreCommandRepo,
        connectivity: IConnectivityMonitor,
        clock: OperatingClock,
        sync_state: SyncState,
        request_timeout: float,
    ) -> None:
        self.local_cache = local_cache
        self.ticket_store_query_repo = ticket_store_query_repo
        self.ticket_store_command_repo = ticket_store_command_repo
        self.connectivity = connectivity
        self.clock = clock
        self.sync_state = sync_state
        self.request_timeout = request_timeout
        self._lock = anyio.Lock()

    @property
    def in_progress(self) -> bool:
        return self._lock.locked()

    @Logger.io
    async def pull(self) -> Optional[SyncReport]:
        if not self.connectivity.is_online:
            Logger.base.info('📴 [SYNC] Offline, pull skipped')
            return None
        if self._lock.locked():
            Logger.base.info('⏭️ [SYNC] Sync already in progress, pull skipped')
            return None

        async with self._lock:
            self.sync_state.in_progress = True
            try:
                return await self._pull_locked()
            finally:
                self.sync_state.in_progress = False

    @Logger.io
    async def push_pending(self) -> Optional[SyncReport]:
        if self._lock.locked():
            Logger.base.info('⏭️ [SYNC] Sync already in progress, push skipped')
            return None

        async with self._lock:
            self.sync_state.in_progress = True
            try:
                pushed, failed = await self._push_pending_locked()
            finally:
                self.sync_state.in_progress = False
        return SyncReport(succeeded=failed == 0, pushed=pushed, push_failed=failed)

    async def force_sync(self) -> Optional[SyncReport]:
        Logger.base.info('🔄 [SYNC] Manual sync requested')
        return await self.pull()

    async def _pull_locked(self) -> SyncReport:
        session_date = self.clock.today()
        try:
            with anyio.fail_after(self.request_timeout):
                server_tickets = await self.ticket_store_query_repo.list_paid_tickets_for_day(
                    session_date=session_date
                )
        except Exception as e:
            error = f'{type(e).__name__}: {e}'
            self.sync_state.last_error = error
            Logger.base.warning(f'⚠️ [SYNC] Pull failed, using offline data: {error}')
            return SyncReport(succeeded=False, error=error)

        if self.clock.today() != session_date:
            # The operating day rolled over while the query was in flight
            error = f'Operating day changed during pull of {session_date}'
            self.sync_state.last_error = error
            Logger.base.info(f'🌅 [SYNC] {error}, result discarded')
            return SyncReport(succeeded=False, error=error)

        # Read the cache only after the fetch returned, so validations made
        # while the query was in flight are part of the merge
        merged, kept_local = self._merge(
            server_tickets, self.local_cache.all(), synced_at=self.clock.now()
        )
        self.local_cache.save(merged)
        self.sync_state.last_sync = self.clock.now()
        self.sync_state.last_error = None

        pending_count = sum(1 for ticket in merged if ticket.needs_sync)
        Logger.base.info(
            f'📥 [SYNC] {len(merged)} tickets for {session_date} '
            f'({kept_local} local versions kept, {pending_count} pending)'
        )

        pushed = failed = 0
        if pending_count or self.local_cache.stale_pending_count:
            pushed, failed = await self._push_pending_locked()

        return SyncReport(
            succeeded=True,
            fetched=len(server_tickets),
            kept_local=kept_local,
            pushed=pushed,
            push_failed=failed,
        )

    @staticmethod
    def _merge(
        server_tickets: List[CachedTicket],
        cached_tickets: List[CachedTicket],
        *,
        synced_at: datetime,
    ) -> tuple[List[CachedTicket], int]:
        cached_by_id = {ticket.id: ticket for ticket in cached_tickets}
        merged: List[CachedTicket] = []
        kept_local = 0

        for server_ticket in server_tickets:
            cached = cached_by_id.pop(server_ticket.id, None)
            if cached is not None and cached.needs_sync:
                merged.append(cached)
                kept_local += 1
            else:
                # The store does not record how the gate matched the code
                if (
                    cached is not None
                    and server_ticket.validation_method is None
                    and cached.used_at == server_ticket.used_at
                ):
                    server_ticket.validation_method = cached.validation_method
                server_ticket.last_synced = synced_at
                merged.append(server_ticket)

        # Unsynced validations the store no longer lists stay until pushed
        for leftover in cached_by_id.values():
            if leftover.needs_sync:
                merged.append(leftover)
                kept_local += 1

        return merged, kept_local

    async def _push_pending_locked(self) -> tuple[int, int]:
        pushed = failed = 0

        for ticket in self.local_cache.pending():
            outcome = await self._write_back(ticket)
            if outcome is None:
                failed += 1
                continue
            self.local_cache.mark_synced(
                ticket_id=ticket.id, used_at=ticket.used_at, at=self.clock.now()
            )
            pushed += 1

        unsent: List[CachedTicket] = []
        for ticket in self.local_cache.take_stale_pending():
            if await self._write_back(ticket) is None:
                unsent.append(ticket)
                failed += 1
            else:
                pushed += 1
        if unsent:
            self.local_cache.restore_stale_pending(unsent)

        if pushed or failed:
            Logger.base.info(f'📤 [SYNC] Pushed {pushed} validations, {failed} failed')
        return pushed, failed

    async def _write_back(self, ticket: CachedTicket) -> Optional[WriteBackOutcome]:
        try:
            with anyio.fail_after(self.request_timeout):
                outcome = await self.ticket_store_command_repo.write_back_validation(ticket=ticket)
        except Exception as e:
            Logger.base.warning(
                f'⚠️ [SYNC] Push failed for {ticket.ticket_number}, retrying next cycle: '
                f'{type(e).__name__}: {e}'
            )
            return None

        if outcome == WriteBackOutcome.ALREADY_USED:
            Logger.base.warning(
                f'⚠️ [SYNC] Ticket {ticket.ticket_number} was already used on the store side; '
                f'local validation by {ticket.validated_by} at {ticket.used_at} is a double scan'
            )
        elif outcome in (WriteBackOutcome.CANCELLED, WriteBackOutcome.MISSING):
            Logger.base.warning(
                f'⚠️ [SYNC] Ticket {ticket.ticket_number} is {outcome} on the store side; '
                'local validation acknowledged without update'
            )
        return outcome
