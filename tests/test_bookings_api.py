from tests.conftest import as_user

BODY = {"room_id": "A101", "booking_date": "2024-06-01", "start_time": "09:00", "end_time": "10:00"}


def login(client, user_id, role="staff"):
    client.cookies = as_user(user_id, role)


def test_booking_requires_user_cookie(client, make_room):
    make_room()
    r = client.post("/bookings", json=BODY)
    assert r.status_code == 401


def test_create_accept_cancel_flow(client, make_room):
    make_room()
    login(client, "u-1")
    r = client.post("/bookings", json={**BODY, "note": "Team sync"})
    assert r.status_code == 201
    booking = r.json()
    assert booking["booking_id"] == "BK00001"
    assert booking["status"] == "PENDING"
    assert booking["room"]["room_id"] == "A101"

    # staff cannot decide
    r = client.put("/bookings/BK00001", json={"status": "ACCEPTED"})
    assert r.status_code == 403
    assert r.json()["error"] == "forbidden"

    login(client, "admin-1", "admin")
    r = client.put("/bookings/BK00001", json={"status": "ACCEPTED", "admin_note": "Approved"})
    assert r.status_code == 200
    assert r.json()["status"] == "ACCEPTED"

    schedules = client.get("/rooms/A101/schedules").json()
    assert len(schedules) == 1
    assert schedules[0]["start_time"] == "09:00:00"
    assert schedules[0]["holder_user_id"] == "u-1"

    login(client, "u-1")
    r = client.delete("/bookings/BK00001")
    assert r.status_code == 200
    assert r.json()["booking_id"] == "BK00001"
    assert client.get("/rooms/A101/schedules").json() == []

    r = client.delete("/bookings/BK00001")
    assert r.status_code == 404
    assert r.json()["error"] == "booking_not_found"


def test_conflicts_surface_as_time_unavailable(client, make_room):
    make_room()
    login(client, "u-1")
    assert client.post("/bookings", json=BODY).status_code == 201

    login(client, "u-2")
    r = client.post("/bookings", json={**BODY, "start_time": "09:30", "end_time": "09:45"})
    assert r.status_code == 409
    assert r.json()["error"] == "time_unavailable"
    assert "pending or accepted" in r.json()["detail"]

    login(client, "admin-1", "admin")
    client.put("/bookings/BK00001", json={"status": "ACCEPTED"})

    login(client, "u-2")
    r = client.post("/bookings", json={**BODY, "end_time": "09:30"})
    assert r.status_code == 409
    assert r.json()["error"] == "time_unavailable"
    assert "already booked" in r.json()["detail"]


def test_validation_errors(client, make_room):
    make_room()
    make_room("Z999", is_active=False)
    login(client, "u-1")

    r = client.post("/bookings", json={**BODY, "end_time": "08:00"})
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_interval"

    r = client.post("/bookings", json={**BODY, "room_id": "NOPE"})
    assert r.status_code == 404
    assert r.json()["error"] == "room_not_found"

    r = client.post("/bookings", json={**BODY, "room_id": "Z999"})
    assert r.status_code == 400
    assert r.json()["error"] == "room_inactive"

    r = client.post("/bookings", json={"room_id": "A101"})
    assert r.status_code == 422


def test_decide_twice_is_invalid_state(client, make_room):
    make_room()
    login(client, "u-1")
    client.post("/bookings", json=BODY)

    login(client, "admin-1", "admin")
    assert client.put("/bookings/BK00001", json={"status": "REJECTED"}).status_code == 200
    r = client.put("/bookings/BK00001", json={"status": "ACCEPTED"})
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_state"

    r = client.put("/bookings/BK00001", json={"status": "MAYBE"})
    assert r.status_code == 422


def test_other_users_cannot_cancel_or_see(client, make_room):
    make_room()
    login(client, "u-1")
    client.post("/bookings", json=BODY)

    login(client, "u-2")
    assert client.get("/bookings/BK00001").status_code == 404
    assert client.get("/bookings").json() == []
    r = client.delete("/bookings/BK00001")
    assert r.status_code == 403

    login(client, "admin-1", "admin")
    assert client.get("/bookings/BK00001").json()["user_id"] == "u-1"
    assert len(client.get("/bookings").json()) == 1
    assert client.delete("/bookings/BK00001").status_code == 200


def test_list_sorted_by_booking_date(client, make_room):
    make_room()
    login(client, "u-1")
    client.post("/bookings", json={**BODY, "booking_date": "2024-06-03"})
    client.post("/bookings", json={**BODY, "booking_date": "2024-06-01"})

    r = client.get("/bookings", params={"sort_by": "booking_date", "sort_order": "asc"})
    assert [b["booking_date"] for b in r.json()] == ["2024-06-01", "2024-06-03"]
    assert client.get("/bookings", params={"sort_by": "note"}).status_code == 422
