"""
Connectivity Monitor

Tracks whether the Ticket Store side is reachable and turns the
offline -> online edge into an immediate sync.

Reachability signal:
- An HTTP probe against CONNECTIVITY_PROBE_URL on a fixed interval; any HTTP
  response counts as reachable, a transport error or timeout does not
- The device platform may push the signal directly through set_online()
  (PUT /api/validator/connectivity)

An empty probe URL disables probing; the flag then only follows pushed signals.
"""

from typing import Awaitable, Callable, List, Optional

import anyio
from anyio.abc import TaskGroup
import httpx

from src.platform.logging.loguru_io import Logger
from src.service.validation.app.interface.i_connectivity_monitor import IConnectivityMonitor


ReconnectListener = Callable[[], Awaitable[object]]


class ConnectivityMonitor(IConnectivityMonitor):
    def __init__(
        self,
        *,
        probe_url: str,
        probe_timeout: float,
        check_interval: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.probe_url = probe_url
        self.probe_timeout = probe_timeout
        self.check_interval = check_interval
        self._transport = transport
        self._online = True
        self._listeners: List[ReconnectListener] = []
        self._task_group: Optional[TaskGroup] = None

    @property
    def is_online(self) -> bool:
        return self._online

    def add_reconnect_listener(self, listener: ReconnectListener) -> None:
        self._listeners.append(listener)

    async def probe(self) -> bool:
        if not self.probe_url:
            return self._online

        try:
            async with httpx.AsyncClient(
                timeout=self.probe_timeout, transport=self._transport
            ) as client:
                await client.get(self.probe_url)
        except httpx.HTTPError as e:
            Logger.base.debug(f'🔌 [CONNECTIVITY] Probe {self.probe_url} failed: {e!r}')
            return False
        return True

    @Logger.io
    async def initialize(self) -> bool:
        """Seed the flag from one probe; listeners are not notified."""
        self._online = await self.probe()
        Logger.base.info(
            f'📡 [CONNECTIVITY] Starting {"online" if self._online else "offline"}'
        )
        return self._online

    async def check_now(self) -> bool:
        await self.set_online(await self.probe())
        return self._online

    async def set_online(self, online: bool) -> None:
        was_online, self._online = self._online, online
        if was_online == online:
            return

        if not online:
            Logger.base.warning('📴 [CONNECTIVITY] Went offline, validating from local cache')
            return

        Logger.base.info('📶 [CONNECTIVITY] Back online, triggering sync')
        for listener in list(self._listeners):
            if self._task_group is not None:
                self._task_group.start_soon(self._notify, listener)
            else:
                await self._notify(listener)

    @staticmethod
    async def _notify(listener: ReconnectListener) -> None:
        try:
            await listener()
        except Exception as e:
            Logger.base.warning(f'⚠️ [CONNECTIVITY] Reconnect listener failed: {e}')

    def start(self, *, task_group: TaskGroup) -> None:
        self._task_group = task_group
        if self.probe_url:
            task_group.start_soon(self.run)

    async def run(self) -> None:
        Logger.base.info(
            f'🔄 [CONNECTIVITY] Probing {self.probe_url} every {self.check_interval}s'
        )
        while True:
            await anyio.sleep(self.check_interval)
            await self.check_now()
