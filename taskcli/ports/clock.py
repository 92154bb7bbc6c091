from typing import Protocol
from datetime import datetime

class Clock(Protocol):
    """Time source abstraction. Returns timezone-aware UTC time."""
    def now(self) -> datetime:
        pass
