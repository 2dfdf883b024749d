from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.validation.app.interface.i_local_ticket_cache import ILocalTicketCache
from src.service.validation.domain.value_object.sync_status import SyncState


class ClearCacheUseCase:
    """
    Manual reset of the device cache.

    Unsynced validations are not dropped: they stay in the cache, so a re-scan
    is still rejected and the next sync cycle pushes them.
    """

    def __init__(self, *, local_cache: ILocalTicketCache, sync_state: SyncState) -> None:
        self.local_cache = local_cache
        self.sync_state = sync_state

    @classmethod
    @inject
    def depends(
        cls,
        local_cache: ILocalTicketCache = Depends(Provide[Container.local_ticket_cache]),
        sync_state: SyncState = Depends(Provide[Container.sync_state]),
    ) -> Self:
        return cls(local_cache=local_cache, sync_state=sync_state)

    @Logger.io
    async def execute(self) -> int:
        dropped = self.local_cache.clear()
        self.sync_state.last_sync = None
        Logger.base.info(f'🗑️ [CACHE] Cleared {dropped} cached tickets')
        return dropped
