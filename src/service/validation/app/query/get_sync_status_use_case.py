from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.validation.app.interface.i_connectivity_monitor import IConnectivityMonitor
from src.service.validation.app.interface.i_local_ticket_cache import ILocalTicketCache
from src.service.validation.domain.value_object.sync_status import SyncState, SyncStatus


class GetSyncStatusUseCase:
    def __init__(
        self,
        *,
        local_cache: ILocalTicketCache,
        connectivity: IConnectivityMonitor,
        sync_state: SyncState,
    ) -> None:
        self.local_cache = local_cache
        self.connectivity = connectivity
        self.sync_state = sync_state

    @classmethod
    @inject
    def depends(
        cls,
        local_cache: ILocalTicketCache = Depends(Provide[Container.local_ticket_cache]),
        connectivity: IConnectivityMonitor = Depends(Provide[Container.connectivity_monitor]),
        sync_state: SyncState = Depends(Provide[Container.sync_state]),
    ) -> Self:
        return cls(local_cache=local_cache, connectivity=connectivity, sync_state=sync_state)

    @Logger.io
    async def execute(self) -> SyncStatus:
        """Snapshot for the status indicator; pending_sync includes carry-over tickets."""
        tickets = self.local_cache.all()
        pending = sum(1 for ticket in tickets if ticket.needs_sync)

        return SyncStatus(
            is_online=self.connectivity.is_online,
            last_sync=self.sync_state.last_sync,
            total_tickets=len(tickets),
            pending_sync=pending + self.local_cache.stale_pending_count,
            sync_in_progress=self.sync_state.in_progress,
            operating_day=self.local_cache.operating_day,
            last_update=self.local_cache.last_update,
            last_error=self.sync_state.last_error,
        )
