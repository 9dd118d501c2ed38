from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.ledger import ScheduleLedger
from app.models import BookingRequest, Room, ScheduleEntry
from app.resolver import OUTSTANDING_STATUSES


SORTABLE_FIELDS = {
    "created_at": BookingRequest.created_at,
    "booking_date": BookingRequest.booking_date,
    "start_time": BookingRequest.start_time,
}


class RoomRepository:
    """Room lookups bound to one session (the transaction handle)."""

    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, pk: int) -> Room | None:
        return self.session.get(Room, pk)

    def find_by_room_code(self, room_id: str, for_update: bool = False) -> Room | None:
        stmt = (
            select(Room)
            .where(Room.room_id == room_id)
            .options(selectinload(Room.schedules))
        )
        if for_update:
            stmt = stmt.with_for_update()
        return self.session.scalars(stmt).first()

    def list_active(self) -> list[Room]:
        stmt = (
            select(Room)
            .where(Room.is_active.is_(True))
            .options(selectinload(Room.schedules))
            .order_by(Room.room_id)
        )
        return list(self.session.scalars(stmt))

    def list_all(self) -> list[Room]:
        stmt = select(Room).options(selectinload(Room.schedules)).order_by(Room.room_id)
        return list(self.session.scalars(stmt))

    def save(self, room: Room) -> Room:
        self.session.add(room)
        self.session.flush()
        return room

    def append_schedule_entry(self, room: Room, entry: ScheduleEntry) -> ScheduleEntry:
        ScheduleLedger(room).add(entry)
        self.session.flush()
        return entry

    def remove_schedule_entry(self, room: Room, booking: BookingRequest) -> ScheduleEntry | None:
        removed = ScheduleLedger(room).remove(
            booking.booking_date, booking.start_time, booking.end_time, booking.user_id
        )
        self.session.flush()
        return removed


class BookingRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, pk: int) -> BookingRequest | None:
        return self.session.get(BookingRequest, pk)

    def find_by_booking_code(self, booking_id: str) -> BookingRequest | None:
        stmt = select(BookingRequest).where(BookingRequest.booking_id == booking_id)
        return self.session.scalars(stmt).first()

    def create(self, booking: BookingRequest) -> BookingRequest:
        self.session.add(booking)
        self.session.flush()
        return booking

    def update_status(self, booking: BookingRequest, status: str, note: str | None = None,
                      admin_note: str | None = None) -> BookingRequest:
        booking.status = status
        if note is not None:
            booking.note = note
        if admin_note is not None:
            booking.admin_note = admin_note
        self.session.flush()
        return booking

    def delete(self, booking: BookingRequest) -> None:
        self.session.delete(booking)
        self.session.flush()

    def count(self) -> int:
        return self.session.scalar(select(func.count()).select_from(BookingRequest)) or 0

    def booking_codes(self) -> list[str]:
        return list(self.session.scalars(select(BookingRequest.booking_id)))

    def outstanding_for_room(self, room: Room, on_date: date) -> list[BookingRequest]:
        stmt = select(BookingRequest).where(
            BookingRequest.room_pk == room.id,
            BookingRequest.booking_date == on_date,
            BookingRequest.status.in_(OUTSTANDING_STATUSES),
        )
        return list(self.session.scalars(stmt))

    def search(
        self,
        user_id: str | None = None,
        status: str | None = None,
        room: Room | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> list[BookingRequest]:
        stmt = select(BookingRequest).options(selectinload(BookingRequest.room))
        if user_id is not None:
            stmt = stmt.where(BookingRequest.user_id == user_id)
        if status is not None:
            stmt = stmt.where(BookingRequest.status == status.upper())
        if room is not None:
            stmt = stmt.where(BookingRequest.room_pk == room.id)
        if start_date is not None:
            stmt = stmt.where(BookingRequest.booking_date >= start_date)
        if end_date is not None:
            stmt = stmt.where(BookingRequest.booking_date <= end_date)
        column = SORTABLE_FIELDS.get(sort_by)
        if column is None:
            raise ValueError(f"Cannot sort bookings by {sort_by!r}")
        if descending:
            stmt = stmt.order_by(column.desc(), BookingRequest.id.desc())
        else:
            stmt = stmt.order_by(column.asc(), BookingRequest.id.asc())
        return list(self.session.scalars(stmt))
