"""
Pydantic shapes returned by the booking engine and accepted by the routers.
"""
from datetime import date, datetime, time
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models import BookingRequest, Room, ScheduleEntry

Decision = Literal["ACCEPTED", "REJECTED"]


class RoomRef(BaseModel):
    room_id: str
    name: str
    location: str


class RoomOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    room_id: str
    name: str
    location: str
    capacity: int
    is_active: bool
    features: List[str] = []
    description: Optional[str] = None


class ScheduleOut(BaseModel):
    id: int
    date: date
    start_time: time
    end_time: time
    holder_user_id: str
    note: str
    room: RoomRef

    @classmethod
    def from_entry(cls, entry: ScheduleEntry, room: Room) -> "ScheduleOut":
        return cls(
            id=entry.id,
            date=entry.date,
            start_time=entry.start_time,
            end_time=entry.end_time,
            holder_user_id=entry.holder_user_id,
            note=entry.note or "",
            room=RoomRef(room_id=room.room_id, name=room.name, location=room.location),
        )


class BookingOut(BaseModel):
    booking_id: str
    user_id: str
    room: RoomRef
    booking_date: date
    start_time: time
    end_time: time
    note: str
    admin_note: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_booking(cls, booking: BookingRequest, room: Room) -> "BookingOut":
        return cls(
            booking_id=booking.booking_id,
            user_id=booking.user_id,
            room=RoomRef(room_id=room.room_id, name=room.name, location=room.location),
            booking_date=booking.booking_date,
            start_time=booking.start_time,
            end_time=booking.end_time,
            note=booking.note or "",
            admin_note=booking.admin_note,
            status=booking.status,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )


class CreateBookingBody(BaseModel):
    room_id: str = Field(..., min_length=1)
    booking_date: date
    start_time: time
    end_time: time
    note: Optional[str] = None


class DecisionBody(BaseModel):
    status: Decision
    admin_note: Optional[str] = None


class CancelOut(BaseModel):
    message: str = "Booking cancelled successfully"
    booking_id: str
