# tests/conftest.py
import os
import tempfile
from datetime import date, time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ["SKIP_DB_INIT"] = "1"

from app.bookings import BookingService
from app.booking_ids import BookingIdGenerator
from app.db import Base, get_session_factory
from app.main import app
from app.models import BookingRequest, Room
from app.unit_of_work import RoomLocks, UnitOfWork


@pytest.fixture(scope="function")
def session_factory():
    # temp DB
    tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    tmp.close()
    db_url = f"sqlite:///{tmp.name}"

    # test engine / Session
    engine = create_engine(db_url, connect_args={"check_same_thread": False, "timeout": 30})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        engine.dispose()
        os.unlink(tmp.name)


@pytest.fixture
def test_db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def service(session_factory):
    return BookingService(
        session_factory,
        id_generator=BookingIdGenerator(),
        uow=UnitOfWork(session_factory, room_locks=RoomLocks()),
    )


@pytest.fixture(scope="function")
def client(session_factory):
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


def as_user(user_id, role="staff"):
    return {"userId": user_id, "role": role}


# —— Factories ——
@pytest.fixture
def make_room(test_db_session):
    def _make_room(room_id="A101", name="Room A101", capacity=30, is_active=True, location="Building A"):
        r = Room(room_id=room_id, name=name, capacity=capacity, is_active=is_active, location=location)
        test_db_session.add(r)
        test_db_session.commit()
        return r
    return _make_room


@pytest.fixture
def make_booking(test_db_session):
    """Insert a booking row directly, bypassing the admission checks."""
    def _make_booking(room, booking_id, user_id="u-1", on=date(2024, 6, 1),
                      start=time(9, 0), end=time(10, 0), status="PENDING", note=""):
        b = BookingRequest(
            booking_id=booking_id, user_id=user_id, room_pk=room.id, booking_date=on,
            start_time=start, end_time=end, status=status, note=note,
        )
        test_db_session.add(b)
        test_db_session.commit()
        return b
    return _make_booking
