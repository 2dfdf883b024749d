"""
Wire Modules Configuration

Modules whose ``@inject`` functions resolve ``Provide[Container.xxx]`` markers.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.validation.app.command import (
    clear_cache_use_case,
    force_sync_use_case,
    report_connectivity_use_case,
    validate_ticket_use_case,
)
from src.service.validation.app.query import get_sync_status_use_case, search_tickets_use_case


WIRE_MODULES: list[ModuleType] = [
    validate_ticket_use_case,
    force_sync_use_case,
    report_connectivity_use_case,
    clear_cache_use_case,
    get_sync_status_use_case,
    search_tickets_use_case,
]
