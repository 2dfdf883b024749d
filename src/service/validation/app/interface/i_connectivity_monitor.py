from abc import ABC, abstractmethod


class IConnectivityMonitor(ABC):
    """Online/offline flag of the device. Never gates a validation decision."""

    @property
    @abstractmethod
    def is_online(self) -> bool:
        pass

    @abstractmethod
    async def set_online(self, online: bool) -> None:
        """
        Apply a reachability signal.

        An offline -> online transition triggers an immediate pull; the reverse
        only flips the flag.
        """
        pass
