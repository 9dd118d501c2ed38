from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import relationship

from app.db import Base
from app.intervals import TimeInterval

BOOKING_STATUSES = ("PENDING", "ACCEPTED", "REJECTED")


class Room(Base):
    __tablename__ = "rooms"
    id = Column(Integer, primary_key=True, autoincrement=True)
    room_id = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    location = Column(String, nullable=False, default="")
    capacity = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    features = Column(JSON, nullable=False, default=list)
    description = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Only app.ledger.ScheduleLedger mutates this collection.
    schedules = relationship(
        "ScheduleEntry",
        back_populates="room",
        cascade="all, delete-orphan",
        order_by="[ScheduleEntry.date, ScheduleEntry.start_time]",
    )

    __table_args__ = (
        CheckConstraint("capacity >= 1", name="room_capacity_positive"),
    )


class ScheduleEntry(Base):
    __tablename__ = "schedule_entries"
    id = Column(Integer, primary_key=True, autoincrement=True)
    room_pk = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    holder_user_id = Column(String, nullable=False, index=True)
    note = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow)

    room = relationship("Room", back_populates="schedules")

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="schedule_time_valid"),
    )

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(self.date, self.start_time, self.end_time)


class BookingRequest(Base):
    __tablename__ = "bookings"
    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(String(20), unique=True, nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    room_pk = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    booking_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    note = Column(Text, nullable=False, default="")
    admin_note = Column(Text)
    status = Column(String, nullable=False, default="PENDING", index=True)  # PENDING|ACCEPTED|REJECTED
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    room = relationship("Room")

    __table_args__ = (
        CheckConstraint("status in ('PENDING','ACCEPTED','REJECTED')", name="booking_status_valid"),
        CheckConstraint("end_time > start_time", name="booking_time_valid"),
    )

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(self.booking_date, self.start_time, self.end_time)


class Counter(Base):
    __tablename__ = "counters"
    name = Column(String, primary_key=True)
    value = Column(Integer, nullable=False, default=0)
