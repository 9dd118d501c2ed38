"""
Atomic units pairing a booking-status write with a room-ledger write.

A unit is scoped to one room: it holds that room's lock for its whole
duration, so the conflict re-check and the ledger append inside it cannot
interleave with another unit on the same room. The room row is also read
FOR UPDATE, which extends the guarantee across processes on databases that
support row locks.
"""
import logging
import threading
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.errors import StorageFailure
from app.models import BookingRequest, Room, ScheduleEntry
from app.repositories import BookingRepository, RoomRepository

logger = logging.getLogger(__name__)


class RoomLocks:
    """One lock per room code, created on demand."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def get(self, room_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(room_id)
            if lock is None:
                lock = self._locks[room_id] = threading.Lock()
            return lock

    def __len__(self) -> int:
        return len(self._locks)


_room_locks = RoomLocks()


class UnitOfWork:
    def __init__(self, session_factory: sessionmaker, room_locks: RoomLocks | None = None):
        self.session_factory = session_factory
        self.room_locks = room_locks or _room_locks

    def begin(self) -> Session:
        session = self.session_factory()
        session.begin()
        return session

    def commit(self, session: Session) -> None:
        try:
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Commit failed; unit of work rolled back")
            raise StorageFailure(str(exc)) from exc
        finally:
            session.close()

    def abort(self, session: Session) -> None:
        try:
            session.rollback()
        finally:
            session.close()

    @contextmanager
    def transaction(self, room_id: str | None = None):
        """
        Yield a session whose work is committed on clean exit and rolled back
        on any exception. When ``room_id`` is given the room lock is held
        until commit or rollback completes.
        """
        lock = self.room_locks.get(room_id) if room_id is not None else None
        if lock is not None:
            lock.acquire()
        try:
            session = self.begin()
            try:
                yield session
            except SQLAlchemyError as exc:
                self.abort(session)
                logger.exception("Unit of work aborted by storage error")
                raise StorageFailure(str(exc)) from exc
            except BaseException:
                self.abort(session)
                raise
            self.commit(session)
        finally:
            if lock is not None:
                lock.release()

    @contextmanager
    def read(self):
        session = self.session_factory()
        try:
            yield session
        finally:
            session.close()


def accept_and_schedule(session: Session, booking: BookingRequest, room: Room) -> ScheduleEntry:
    """
    Append the booking to the room ledger and mark it ACCEPTED.

    Must run inside ``UnitOfWork.transaction(room.room_id)``. The ledger add
    re-checks for conflicts and raises ScheduleConflict before the status is
    touched, so a refused accept leaves the booking PENDING.
    """
    entry = ScheduleEntry(
        date=booking.booking_date,
        start_time=booking.start_time,
        end_time=booking.end_time,
        holder_user_id=booking.user_id,
        note=booking.note or "",
    )
    RoomRepository(session).append_schedule_entry(room, entry)
    BookingRepository(session).update_status(booking, "ACCEPTED")
    return entry


def cancel_and_unschedule(session: Session, booking: BookingRequest, room: Room) -> ScheduleEntry | None:
    """Retract the ledger entry of an ACCEPTED booking, then delete the booking."""
    removed = None
    if booking.status == "ACCEPTED":
        removed = RoomRepository(session).remove_schedule_entry(room, booking)
        if removed is None:
            logger.warning(
                "Accepted booking %s had no ledger entry on room %s",
                booking.booking_id, room.room_id,
            )
    BookingRepository(session).delete(booking)
    return removed

