"""
Booking request lifecycle.

PENDING is the only mutable state: an admin decision moves a request to
ACCEPTED or REJECTED exactly once, and cancellation removes the request
outright (rolling back its ledger entry if it was ACCEPTED). Every mutation
runs inside a room-scoped unit of work, so an ACCEPTED request and its
ledger entry always appear and disappear together.
"""
import logging
from datetime import date, time

from sqlalchemy.orm import sessionmaker

from app.booking_ids import BookingIdGenerator, booking_ids
from app.errors import (
    BookingNotFound,
    Forbidden,
    InvalidInterval,
    InvalidState,
    RoomInactive,
    RoomNotFound,
)
from app.intervals import TimeInterval
from app.ledger import ScheduleLedger
from app.models import BookingRequest
from app.repositories import BookingRepository, RoomRepository
from app.resolver import check_admissible, check_window, room_is_available
from app.schemas import BookingOut, Decision, RoomOut, ScheduleOut
from app.unit_of_work import UnitOfWork, accept_and_schedule, cancel_and_unschedule

logger = logging.getLogger(__name__)

ADMIN = "admin"


class BookingService:
    def __init__(self, session_factory: sessionmaker, id_generator: BookingIdGenerator | None = None,
                 uow: UnitOfWork | None = None):
        self.uow = uow or UnitOfWork(session_factory)
        self.ids = id_generator or booking_ids

    # ---------- transitions ----------

    def create_booking_request(
        self,
        room_id: str,
        requester_id: str,
        booking_date: date,
        start: time,
        end: time,
        note: str | None = None,
    ) -> BookingOut:
        candidate = TimeInterval(booking_date, start, end)
        # Locks are only created for rooms that exist.
        self._require_room(room_id)

        # Id lock first, then the room lock; decide/cancel only ever take the room lock.
        with self.ids.lock, self.uow.transaction(room_id) as session:
            rooms = RoomRepository(session)
            bookings = BookingRepository(session)

            room = rooms.find_by_room_code(room_id, for_update=True)
            if room is None:
                raise RoomNotFound()
            if not room.is_active:
                raise RoomInactive()

            check_admissible(
                candidate,
                ScheduleLedger(room),
                bookings.outstanding_for_room(room, booking_date),
            )

            booking = bookings.create(BookingRequest(
                booking_id=self.ids.next_id(session),
                user_id=requester_id,
                room_pk=room.id,
                booking_date=booking_date,
                start_time=start,
                end_time=end,
                note=note or "",
                status="PENDING",
            ))
            result = BookingOut.from_booking(booking, room)

        logger.info("Booking %s requested by %s for room %s at %s",
                    result.booking_id, requester_id, room_id, candidate)
        return result

    def decide_booking(self, booking_id: str, decision: Decision, admin_note: str | None = None) -> BookingOut:
        if decision not in ("ACCEPTED", "REJECTED"):
            raise InvalidState("Invalid status. Must be ACCEPTED or REJECTED.")

        room_id = self._room_code_of(booking_id)
        with self.uow.transaction(room_id) as session:
            bookings = BookingRepository(session)
            booking = bookings.find_by_booking_code(booking_id)
            if booking is None:
                raise BookingNotFound()
            if booking.status != "PENDING":
                raise InvalidState()

            room = RoomRepository(session).find_by_room_code(room_id, for_update=True)
            if room is None:
                raise RoomNotFound()

            if admin_note:
                note = f"{booking.note or ''}\n\nAdmin: {admin_note}"
                bookings.update_status(booking, booking.status, note=note, admin_note=admin_note)

            if decision == "ACCEPTED":
                accept_and_schedule(session, booking, room)
            else:
                bookings.update_status(booking, "REJECTED")
            result = BookingOut.from_booking(booking, room)

        logger.info("Booking %s %s", booking_id, decision.lower())
        return result

    def cancel_booking(self, booking_id: str, actor_id: str, actor_role: str | None = None) -> str:
        room_id = self._room_code_of(booking_id)
        with self.uow.transaction(room_id) as session:
            booking = BookingRepository(session).find_by_booking_code(booking_id)
            if booking is None:
                raise BookingNotFound()
            if actor_role != ADMIN and booking.user_id != actor_id:
                logger.info("Cancel of %s refused for %s", booking_id, actor_id)
                raise Forbidden("You can only cancel your own bookings.")

            room = RoomRepository(session).find_by_room_code(room_id, for_update=True)
            if room is None:
                raise RoomNotFound()
            was = booking.status
            cancel_and_unschedule(session, booking, room)

        logger.info("Booking %s (%s) cancelled by %s", booking_id, was, actor_id)
        return booking_id

    def _require_room(self, room_id: str) -> None:
        with self.uow.read() as session:
            if RoomRepository(session).find_by_room_code(room_id) is None:
                raise RoomNotFound()

    def _room_code_of(self, booking_id: str) -> str:
        # Resolve the room before entering the unit so its lock can be taken.
        with self.uow.read() as session:
            booking = BookingRepository(session).find_by_booking_code(booking_id)
            if booking is None:
                raise BookingNotFound()
            return booking.room.room_id

    # ---------- queries ----------

    def get_booking(self, booking_id: str) -> BookingOut:
        with self.uow.read() as session:
            booking = BookingRepository(session).find_by_booking_code(booking_id)
            if booking is None:
                raise BookingNotFound()
            return BookingOut.from_booking(booking, booking.room)

    def list_bookings(
        self,
        actor_id: str,
        actor_role: str | None = None,
        status: str | None = None,
        room_id: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        sort_by: str = "created_at",
        sort_desc: bool = True,
    ) -> list[BookingOut]:
        with self.uow.read() as session:
            room = None
            if room_id is not None:
                room = RoomRepository(session).find_by_room_code(room_id)
                if room is None:
                    raise RoomNotFound()
            rows = BookingRepository(session).search(
                user_id=None if actor_role == ADMIN else actor_id,
                status=status,
                room=room,
                start_date=start_date,
                end_date=end_date,
                sort_by=sort_by,
                descending=sort_desc,
            )
            return [BookingOut.from_booking(b, b.room) for b in rows]

    def list_schedules_for_room(
        self, room_id: str, start_date: date | None = None, end_date: date | None = None
    ) -> list[ScheduleOut]:
        with self.uow.read() as session:
            room = RoomRepository(session).find_by_room_code(room_id)
            if room is None:
                raise RoomNotFound()
            return [ScheduleOut.from_entry(e, room) for e in ScheduleLedger(room).entries(start_date, end_date)]

    def list_schedules(
        self,
        actor_id: str,
        actor_role: str | None = None,
        only_mine: bool = False,
        room_id: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[ScheduleOut]:
        holder = actor_id if (actor_role != ADMIN or only_mine) else None
        with self.uow.read() as session:
            rooms = RoomRepository(session)
            if room_id is not None:
                room = rooms.find_by_room_code(room_id)
                if room is None:
                    raise RoomNotFound()
                candidates = [room]
            else:
                candidates = rooms.list_all()

            out = []
            for room in candidates:
                for entry in ScheduleLedger(room).entries(start_date, end_date):
                    if holder is None or entry.holder_user_id == holder:
                        out.append(ScheduleOut.from_entry(entry, room))
        out.sort(key=lambda s: (s.date, s.start_time, s.room.room_id))
        return out

    def get_room(self, room_id: str) -> RoomOut:
        with self.uow.read() as session:
            room = RoomRepository(session).find_by_room_code(room_id)
            if room is None:
                raise RoomNotFound()
            return RoomOut.model_validate(room)

    def available_rooms(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        start: time | None = None,
        end: time | None = None,
    ) -> list[RoomOut]:
        if start_date is not None:
            check_window(start_date, end_date, start, end)
        elif start is not None or end is not None:
            raise InvalidInterval("A time window needs a date.")
        with self.uow.read() as session:
            rooms = RoomRepository(session).list_active()
            if start_date is not None:
                rooms = [r for r in rooms if room_is_available(r, start_date, end_date, start, end)]
            return [RoomOut.model_validate(r) for r in rooms]
