from dataclasses import dataclass
from datetime import date, time

from app.errors import InvalidInterval


@dataclass(frozen=True, order=True)
class TimeInterval:
    """
    Half-open time range [start, end) on one calendar date.

    Two intervals overlap only when they share a date and
    start_a < end_b and start_b < end_a, so 09:00-10:00 and 10:00-11:00
    can sit back to back.
    """

    date: date
    start: time
    end: time

    def __post_init__(self):
        if self.end <= self.start:
            raise InvalidInterval()

    def overlaps(self, other: "TimeInterval") -> bool:
        return (
            self.date == other.date
            and self.start < other.end
            and other.start < self.end
        )

    def contains(self, other: "TimeInterval") -> bool:
        return (
            self.date == other.date
            and self.start <= other.start
            and other.end <= self.end
        )

    def within(self, start_date: date | None, end_date: date | None) -> bool:
        # inclusive on both ends; None means unbounded
        if start_date is not None and self.date < start_date:
            return False
        if end_date is not None and self.date > end_date:
            return False
        return True

    def __str__(self) -> str:
        return f"{self.date.isoformat()} {self.start:%H:%M}-{self.end:%H:%M}"
