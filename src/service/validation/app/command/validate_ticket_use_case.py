from typing import Self

import anyio
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.clock.operating_clock import OperatingClock
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.validation.app.interface.i_connectivity_monitor import IConnectivityMonitor
from src.service.validation.app.interface.i_local_ticket_cache import ILocalTicketCache
from src.service.validation.app.interface.i_ticket_store_command_repo import (
    ITicketStoreCommandRepo,
)
from src.service.validation.domain.entity.cached_ticket_entity import CachedTicket
from src.service.validation.domain.enum.ticket_status import TicketStatus
from src.service.validation.domain.value_object.validation_result import ValidationResult
from src.service.validation.domain.write_through_backoff import WriteThroughBackoff


class ValidateTicketUseCase:
    """
    Decide whether a scanned or typed code may pass, using local data only.

    Flow:
    1. Resolve the code against today's cached tickets (qr_code or ticket_number)
    2. Reject unknown, cancelled and already used tickets without mutating anything
    3. Accept a valid ticket: mark it used with needs_sync set and persist the
       cache before the first suspension point, so an immediate second scan on
       this device observes the used state
    4. When online, try a bounded write-through to the Ticket Store; success
       clears needs_sync, failure leaves it for the sync engine

    The accept decision is never rolled back by a failed write-through.
    """

    def __init__(
        self,
        *,
        local_cache: ILocalTicketCache,
        ticket_store_command_repo: ITicketStoreCommandRepo,
        connectivity: IConnectivityMonitor,
        clock: OperatingClock,
        backoff: WriteThroughBackoff,
        write_through_timeout: float,
    ) -> None:
        self.local_cache = local_cache
        self.ticket_store_command_repo = ticket_store_command_repo
        self.connectivity = connectivity
        self.clock = clock
        self.backoff = backoff
        self.write_through_timeout = write_through_timeout

    @classmethod
    @inject
    def depends(
        cls,
        local_cache: ILocalTicketCache = Depends(Provide[Container.local_ticket_cache]),
        ticket_store_command_repo: ITicketStoreCommandRepo = Depends(
            Provide[Container.ticket_store_command_repo]
        ),
        connectivity: IConnectivityMonitor = Depends(Provide[Container.connectivity_monitor]),
        clock: OperatingClock = Depends(Provide[Container.clock]),
        backoff: WriteThroughBackoff = Depends(Provide[Container.write_through_backoff]),
        write_through_timeout: float = Depends(
            Provide[Container.settings.provided.WRITE_THROUGH_TIMEOUT_SECONDS]
        ),
    ) -> Self:
        return cls(
            local_cache=local_cache,
            ticket_store_command_repo=ticket_store_command_repo,
            connectivity=connectivity,
            clock=clock,
            backoff=backoff,
            write_through_timeout=write_through_timeout,
        )

    @Logger.io
    async def execute(self, *, code: str, validator_id: str) -> ValidationResult:
        ticket = self.local_cache.find(code)

        # Cancelled tickets get the not-found answer: the gate never reveals cancellation
        if ticket is None or ticket.status == TicketStatus.CANCELLED:
            Logger.base.info(f"🚫 [VALIDATE] {validator_id}: code not in today's set")
            return ValidationResult.not_found()

        if ticket.status == TicketStatus.USED:
            Logger.base.info(
                f'🚫 [VALIDATE] {validator_id}: ticket {ticket.ticket_number} already used '
                f'at {ticket.used_at} by {ticket.validated_by}'
            )
            return ValidationResult.already_used(ticket=ticket)

        validation_method = ticket.matched_by(code)
        assert validation_method is not None, 'find() returned a ticket the code does not match'

        ticket.mark_used(
            validated_by=validator_id,
            validation_method=validation_method,
            at=self.clock.now(),
        )
        self.local_cache.put(ticket)
        Logger.base.info(f'✅ [VALIDATE] {validator_id}: ticket {ticket.ticket_number} accepted')

        if self.connectivity.is_online:
            await self._write_through(ticket)

        return ValidationResult.accept(ticket=self.local_cache.get(ticket.id) or ticket)

    async def _write_through(self, ticket: CachedTicket) -> None:
        now = self.clock.now()
        if not self.backoff.allows(now=now):
            Logger.base.debug(
                f'⏳ [VALIDATE] Write-through backing off until {self.backoff.retry_at}, '
                f'ticket {ticket.ticket_number} left for sync'
            )
            return

        try:
            with anyio.fail_after(self.write_through_timeout):
                outcome = await self.ticket_store_command_repo.write_back_validation(ticket=ticket)
        except Exception as e:
            self.backoff.record_failure(now=self.clock.now())
            Logger.base.warning(
                f'⚠️ [VALIDATE] Write-through failed for {ticket.ticket_number}, '
                f'saved offline for later sync: {type(e).__name__}: {e}'
            )
            return

        self.backoff.record_success()
        self.local_cache.mark_synced(
            ticket_id=ticket.id, used_at=ticket.used_at, at=self.clock.now()
        )
        Logger.base.info(f'📤 [VALIDATE] Write-through {outcome} for {ticket.ticket_number}')
