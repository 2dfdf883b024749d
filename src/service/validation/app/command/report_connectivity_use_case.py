from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.validation.app.interface.i_connectivity_monitor import IConnectivityMonitor


class ReportConnectivityUseCase:
    def __init__(self, *, connectivity: IConnectivityMonitor) -> None:
        self.connectivity = connectivity

    @classmethod
    @inject
    def depends(
        cls,
        connectivity: IConnectivityMonitor = Depends(Provide[Container.connectivity_monitor]),
    ) -> Self:
        return cls(connectivity=connectivity)

    @Logger.io
    async def execute(self, *, online: bool) -> bool:
        """Apply a reachability signal pushed by the device platform."""
        await self.connectivity.set_online(online)
        return self.connectivity.is_online
