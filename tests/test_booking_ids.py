from datetime import date, time

from app.booking_ids import BookingIdGenerator, format_booking_id, parse_booking_id


def test_format_and_parse():
    assert format_booking_id(1) == "BK00001"
    assert format_booking_id(123) == "BK00123"
    assert parse_booking_id("BK00042") == 42
    assert parse_booking_id("XX1") is None


def test_sequence_starts_at_count_plus_one(test_db_session, make_room, make_booking):
    room = make_room()
    make_booking(room, "BK00001")
    make_booking(room, "BK00002", start=time(11, 0), end=time(12, 0))

    gen = BookingIdGenerator()
    assert gen.next_id(test_db_session) == "BK00003"
    assert gen.next_id(test_db_session) == "BK00004"
    test_db_session.commit()


def test_ids_are_not_reused_after_delete(service, make_room):
    make_room()
    first = service.create_booking_request("A101", "u-1", *_slot(9))
    second = service.create_booking_request("A101", "u-1", *_slot(10))
    service.cancel_booking(second.booking_id, "u-1", "staff")

    third = service.create_booking_request("A101", "u-1", *_slot(10))
    assert [first.booking_id, second.booking_id, third.booking_id] == ["BK00001", "BK00002", "BK00003"]


def _slot(hour):
    return date(2024, 6, 1), time(hour, 0), time(hour + 1, 0)
