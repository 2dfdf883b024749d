"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html

Use cases with a ``depends`` classmethod import this module, so the container
only references the ones that are shared process-wide.
"""

from dependency_injector import containers, providers

from src.platform.clock.operating_clock import OperatingClock
from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.service.validation.app.command.sync_tickets_use_case import SyncTicketsUseCase
from src.service.validation.domain.value_object.sync_status import SyncState
from src.service.validation.domain.write_through_backoff import WriteThroughBackoff
from src.service.validation.driven_adapter.cache.local_ticket_cache_impl import (
    LocalTicketCacheImpl,
)
from src.service.validation.driven_adapter.repo.ticket_store_command_repo_impl import (
    TicketStoreCommandRepoImpl,
)
from src.service.validation.driven_adapter.repo.ticket_store_query_repo_impl import (
    TicketStoreQueryRepoImpl,
)
from src.service.validation.driving_adapter.connectivity_monitor import ConnectivityMonitor
from src.service.validation.driving_adapter.sync_scheduler import SyncScheduler


class Container(containers.DeclarativeContainer):
    # Configuration
    settings = providers.Singleton(Settings)

    # Ticket Store (stateless repos - one session per call)
    database = providers.Singleton(Database, settings=settings)
    ticket_store_query_repo = providers.Singleton(
        TicketStoreQueryRepoImpl, session_factory=database.provided.session
    )
    ticket_store_command_repo = providers.Singleton(
        TicketStoreCommandRepoImpl, session_factory=database.provided.session
    )

    # Device state (one owner per process)
    clock = providers.Singleton(OperatingClock, timezone_name=settings.provided.OPERATING_TIMEZONE)
    local_ticket_cache = providers.Singleton(
        LocalTicketCacheImpl,
        cache_dir=settings.provided.CACHE_DIR,
        file_name=settings.provided.CACHE_FILE_NAME,
        clock=clock,
    )
    sync_state = providers.Singleton(SyncState)
    write_through_backoff = providers.Singleton(
        WriteThroughBackoff,
        base_seconds=settings.provided.WRITE_THROUGH_BACKOFF_BASE_SECONDS,
        max_seconds=settings.provided.WRITE_THROUGH_BACKOFF_MAX_SECONDS,
    )

    connectivity_monitor = providers.Singleton(
        ConnectivityMonitor,
        probe_url=settings.provided.CONNECTIVITY_PROBE_URL,
        probe_timeout=settings.provided.CONNECTIVITY_PROBE_TIMEOUT_SECONDS,
        check_interval=settings.provided.CONNECTIVITY_CHECK_INTERVAL_SECONDS,
    )

    # Sync engine holds the pull/push lock, so it must be a Singleton
    sync_tickets_use_case = providers.Singleton(
        SyncTicketsUseCase,
        local_cache=local_ticket_cache,
        ticket_store_query_repo=ticket_store_query_repo,
        ticket_store_command_repo=ticket_store_command_repo,
        connectivity=connectivity_monitor,
        clock=clock,
        sync_state=sync_state,
        request_timeout=settings.provided.SYNC_REQUEST_TIMEOUT_SECONDS,
    )
    sync_scheduler = providers.Singleton(
        SyncScheduler,
        sync_tickets_use_case=sync_tickets_use_case,
        interval=settings.provided.SYNC_INTERVAL_SECONDS,
    )


container = Container()


def cleanup() -> None:
    container.reset_singletons()
