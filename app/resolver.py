import logging
from datetime import date, time
from typing import Iterable

from app.errors import InvalidInterval, PendingConflict, ScheduleConflict
from app.intervals import TimeInterval
from app.ledger import ScheduleLedger
from app.models import BookingRequest, Room

logger = logging.getLogger(__name__)

OUTSTANDING_STATUSES = ("PENDING", "ACCEPTED")


def check_admissible(
    candidate: TimeInterval,
    ledger: ScheduleLedger,
    outstanding: Iterable[BookingRequest],
) -> None:
    """
    Raise if ``candidate`` cannot be booked on the ledger's room.

    The ledger is checked first (ScheduleConflict), then the PENDING/ACCEPTED
    requests that are not yet on the ledger (PendingConflict). Both surface to
    callers as "time unavailable"; the log lines tell them apart.
    """
    clash = ledger.conflicting(candidate)
    if clash is not None:
        logger.info(
            "Schedule conflict on room %s: %s overlaps confirmed entry %s",
            ledger.room.room_id, candidate, clash.interval,
        )
        raise ScheduleConflict()

    for booking in outstanding:
        if booking.status not in OUTSTANDING_STATUSES:
            continue
        if booking.interval.overlaps(candidate):
            logger.info(
                "Pending conflict on room %s: %s overlaps %s request %s",
                ledger.room.room_id, candidate, booking.status, booking.booking_id,
            )
            raise PendingConflict()


def check_window(
    start_date: date,
    end_date: date | None = None,
    start: time | None = None,
    end: time | None = None,
) -> TimeInterval | None:
    """Validate an availability query; returns the time window, or None for whole days."""
    if end_date is not None and end_date < start_date:
        raise InvalidInterval("End date must not be before start date.")
    if (start is None) != (end is None):
        raise InvalidInterval("Both start and end time are required for a time window.")
    if start is None:
        return None
    return TimeInterval(start_date, start, end)


def room_is_available(
    room: Room,
    start_date: date,
    end_date: date | None = None,
    start: time | None = None,
    end: time | None = None,
) -> bool:
    """
    True if the room can take a booking over the given dates.

    With a time window the room must have no entry overlapping that window on
    any date in [start_date, end_date]; without one it must have no entry at
    all on those dates.
    """
    window = check_window(start_date, end_date, start, end)
    if not room.is_active:
        return False

    entries = ScheduleLedger(room).entries(start_date, end_date or start_date)
    if window is None:
        return not entries

    for entry in entries:
        if entry.interval.overlaps(TimeInterval(entry.date, window.start, window.end)):
            return False
    return True
