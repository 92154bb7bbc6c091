from taskcli.ports.clock import Clock
from datetime import datetime, timezone

class SystemClock(Clock):
    """System adapter returning the current wall-clock time in UTC."""

    def now(self) -> datetime:
        """Returns the current time in UTC (aware)."""
        return datetime.now(timezone.utc)
