import anyio
from anyio.abc import TaskGroup

from src.platform.logging.loguru_io import Logger
from src.service.validation.app.command.sync_tickets_use_case import SyncTicketsUseCase


class SyncScheduler:
    """Initial pull on startup, then one pull every interval for the life of the app."""

    def __init__(self, *, sync_tickets_use_case: SyncTicketsUseCase, interval: float) -> None:
        self.sync_tickets_use_case = sync_tickets_use_case
        self.interval = interval

    def start(self, *, task_group: TaskGroup) -> None:
        task_group.start_soon(self.run)

    async def run(self) -> None:
        Logger.base.info(f'⏰ [SYNC] Scheduler started, pulling every {self.interval}s')
        await self.tick()
        while True:
            await anyio.sleep(self.interval)
            await self.tick()

    async def tick(self) -> None:
        # The timer must outlive any single failed cycle
        try:
            await self.sync_tickets_use_case.pull()
        except Exception as e:
            Logger.base.error(f'❌ [SYNC] Scheduled pull crashed: {e}')
