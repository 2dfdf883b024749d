from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.validation.app.command.sync_tickets_use_case import SyncTicketsUseCase
from src.service.validation.domain.value_object.sync_status import SyncReport


class ForceSyncUseCase:
    """Out-of-band pull for the operator's "refresh now" button."""

    def __init__(self, *, sync_tickets_use_case: SyncTicketsUseCase) -> None:
        self.sync_tickets_use_case = sync_tickets_use_case

    @classmethod
    @inject
    def depends(
        cls,
        sync_tickets_use_case: SyncTicketsUseCase = Depends(
            Provide[Container.sync_tickets_use_case]
        ),
    ) -> Self:
        return cls(sync_tickets_use_case=sync_tickets_use_case)

    @Logger.io
    async def execute(self) -> Optional[SyncReport]:
        return await self.sync_tickets_use_case.force_sync()
