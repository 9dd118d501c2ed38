from datetime import time

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from app.bookings import BookingService
from app.booking_ids import BookingIdGenerator
from app.db import get_session_factory
from app.errors import StorageFailure
from app.main import app
from app.unit_of_work import RoomLocks, UnitOfWork
from tests.conftest import as_user


class FailingCommitSession(Session):
    def commit(self):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))


@pytest.fixture
def failing_factory(session_factory):
    return sessionmaker(
        bind=session_factory.kw["bind"], class_=FailingCommitSession,
        autoflush=False, expire_on_commit=False,
    )


def test_failed_commit_leaves_booking_pending(service, failing_factory, make_room, make_booking):
    room = make_room("A101")
    make_booking(room, "BK00001", start=time(9, 0), end=time(10, 0))

    broken = BookingService(
        failing_factory,
        id_generator=BookingIdGenerator(),
        uow=UnitOfWork(failing_factory, room_locks=RoomLocks()),
    )
    with pytest.raises(StorageFailure):
        broken.decide_booking("BK00001", "ACCEPTED", admin_note="ok")

    assert service.get_booking("BK00001").status == "PENDING"
    assert service.get_booking("BK00001").admin_note is None
    assert service.list_schedules_for_room("A101") == []


def test_failed_commit_returns_storage_failure(client, failing_factory, make_room, make_booking):
    room = make_room("A101")
    make_booking(room, "BK00001", start=time(9, 0), end=time(10, 0))

    app.dependency_overrides[get_session_factory] = lambda: failing_factory
    client.cookies = as_user("admin-1", "admin")
    r = client.put("/bookings/BK00001", json={"status": "ACCEPTED"})
    assert r.status_code == 500
    assert r.json()["error"] == "storage_failure"
