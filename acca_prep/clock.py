from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Source of the current time, injected so schedules can be tested"""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall-clock time in UTC"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock pinned to a given instant; advance it explicitly"""

    def __init__(self, current: datetime):
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, days: int = 0, **kwargs) -> datetime:
        self.current = self.current + timedelta(days=days, **kwargs)
        return self.current
