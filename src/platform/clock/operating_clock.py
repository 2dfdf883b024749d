from datetime import date, datetime, timezone
import zoneinfo


class OperatingClock:
    """
    Wall clock of the venue.

    Timestamps are always timezone-aware UTC. The operating day is the calendar
    date in the venue's timezone, which is what scopes the local ticket cache.
    """

    def __init__(self, *, timezone_name: str) -> None:
        self._tz = zoneinfo.ZoneInfo(timezone_name)

    @property
    def tz(self) -> zoneinfo.ZoneInfo:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def today(self) -> date:
        return self.now().astimezone(self._tz).date()
