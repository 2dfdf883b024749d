"""
Gate Validator Service - Main Application
Validates tickets at the gate from a day-scoped local cache and reconciles
with the Ticket Store in the background.
"""

from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan: startup and shutdown"""
    Logger.base.info('🚀 [Validator] Starting up...')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Validator] Dependency injection wired')

    # Offline data first: the gate can validate before the first pull returns
    container.local_ticket_cache().load()

    monitor = container.connectivity_monitor()
    await monitor.initialize()
    monitor.add_reconnect_listener(container.sync_tickets_use_case().pull)

    async with anyio.create_task_group() as task_group:
        monitor.start(task_group=task_group)
        container.sync_scheduler().start(task_group=task_group)
        Logger.base.info('✅ [Validator] Startup complete')

        yield

        Logger.base.info('🛑 [Validator] Shutting down...')
        task_group.cancel_scope.cancel()

    await container.database().dispose()
    container.unwire()
    Logger.base.info('👋 [Validator] Shutdown complete')


app = create_app(lifespan=lifespan)
