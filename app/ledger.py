import logging
from datetime import date, time

from app.errors import ScheduleConflict
from app.intervals import TimeInterval
from app.models import Room, ScheduleEntry

logger = logging.getLogger(__name__)


class ScheduleLedger:
    """
    The confirmed, non-overlapping reservations of one room.

    Wraps ``Room.schedules``; every add/remove on a room's schedule goes
    through here so the no-overlap invariant is enforced in one place.
    Callers are expected to hold the room's unit of work (see
    app.unit_of_work) while mutating.
    """

    def __init__(self, room: Room):
        self.room = room

    def __len__(self) -> int:
        return len(self.room.schedules)

    def entries(self, start_date: date | None = None, end_date: date | None = None) -> list[ScheduleEntry]:
        found = [e for e in self.room.schedules if e.interval.within(start_date, end_date)]
        found.sort(key=lambda e: (e.date, e.start_time, e.end_time))
        return found

    def conflicting(self, candidate: TimeInterval) -> ScheduleEntry | None:
        for entry in self.room.schedules:
            if entry.interval.overlaps(candidate):
                return entry
        return None

    def conflicts(self, candidate: TimeInterval) -> bool:
        return self.conflicting(candidate) is not None

    def add(self, entry: ScheduleEntry) -> ScheduleEntry:
        clash = self.conflicting(entry.interval)
        if clash is not None:
            logger.info(
                "Ledger add refused for room %s: %s overlaps %s",
                self.room.room_id, entry.interval, clash.interval,
            )
            raise ScheduleConflict()
        self.room.schedules.append(entry)
        return entry

    def remove(self, on_date: date, start: time, end: time, holder_user_id: str) -> ScheduleEntry | None:
        """Drop the first entry matching all four fields; missing entries are not an error."""
        for entry in self.room.schedules:
            if (
                entry.date == on_date
                and entry.start_time == start
                and entry.end_time == end
                and entry.holder_user_id == holder_user_id
            ):
                self.room.schedules.remove(entry)
                return entry
        return None
