from datetime import date, datetime
from typing import Optional

import attrs


@attrs.define
class SyncState:
    """Process-wide sync bookkeeping, owned by the sync engine."""

    last_sync: Optional[datetime] = None
    in_progress: bool = False
    last_error: Optional[str] = None


@attrs.frozen
class SyncReport:
    succeeded: bool
    fetched: int = 0
    kept_local: int = 0
    pushed: int = 0
    push_failed: int = 0
    error: Optional[str] = None


@attrs.frozen
class SyncStatus:
    is_online: bool
    last_sync: Optional[datetime]
    total_tickets: int
    pending_sync: int
    sync_in_progress: bool = False
    operating_day: Optional[date] = None
    last_update: Optional[datetime] = None
    last_error: Optional[str] = None
