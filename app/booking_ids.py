import logging
import re
import threading

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models import Counter
from app.repositories import BookingRepository

logger = logging.getLogger(__name__)

PREFIX = "BK"
WIDTH = 5
COUNTER_NAME = "booking_id"
_CODE_RE = re.compile(rf"^{PREFIX}(\d+)$")


def format_booking_id(seq: int) -> str:
    return f"{PREFIX}{seq:0{WIDTH}d}"


def parse_booking_id(booking_id: str) -> int | None:
    m = _CODE_RE.match(booking_id or "")
    return int(m.group(1)) if m else None


class BookingIdGenerator:
    """
    Hands out BK00001, BK00002, ... from a persisted counter.

    Counting booking rows and adding one races under concurrent creates and
    reissues ids after a deletion, so the counter is a row of its own,
    incremented inside the caller's unit of work while ``lock`` is held.
    Callers hold the lock until that unit commits. The first use seeds the
    counter from the existing bookings, so a fresh database starts at
    count + 1.
    """

    def __init__(self):
        self.lock = threading.Lock()

    def next_id(self, session: Session) -> str:
        counter = session.scalars(
            select(Counter).where(Counter.name == COUNTER_NAME).with_for_update()
        ).first()
        if counter is None:
            counter = Counter(name=COUNTER_NAME, value=self._seed(session))
            session.add(counter)
        counter.value += 1
        session.flush()
        booking_id = format_booking_id(counter.value)
        logger.debug("Issued booking id %s", booking_id)
        return booking_id

    @staticmethod
    def _seed(session: Session) -> int:
        bookings = BookingRepository(session)
        highest = max(
            (seq for seq in map(parse_booking_id, bookings.booking_codes()) if seq is not None),
            default=0,
        )
        return max(bookings.count(), highest)


booking_ids = BookingIdGenerator()
