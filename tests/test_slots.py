from datetime import datetime, timedelta

from app.models.appointment_slot import AppointmentSlot
from app.models.booking import Booking
from app.utils.timeslots import utcnow
from tests.conftest import iso, tomorrow_at

API = "/api/v1/appointments"


def test_create_slot(client, artist):
    resp = client.post(API, json={"dateTime": iso(tomorrow_at(10)), "duration": 60}, headers=artist["headers"])
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["slot"]["duration"] == 60
    assert body["slot"]["isBooked"] is False
    assert datetime.fromisoformat(body["slot"]["dateTime"].replace("Z", "+00:00")).utcoffset() == timedelta(0)


def test_create_slot_requires_token(client):
    resp = client.post(API, json={"dateTime": iso(tomorrow_at(10)), "duration": 60})
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Token required"}


def test_create_slot_rejects_invalid_token(client):
    resp = client.post(
        API,
        json={"dateTime": iso(tomorrow_at(10)), "duration": 60},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert resp.status_code == 403
    assert resp.json()["message"] == "Invalid token"


def test_non_artist_cannot_create_slot(client, customer):
    resp = client.post(API, json={"dateTime": iso(tomorrow_at(10)), "duration": 60}, headers=customer["headers"])
    assert resp.status_code == 403
    assert resp.json()["message"] == "Only artists can create appointment slots"


def test_slot_must_be_in_future(client, artist):
    past = utcnow() - timedelta(hours=1)
    resp = client.post(API, json={"dateTime": iso(past), "duration": 60}, headers=artist["headers"])
    assert resp.status_code == 400


def test_slot_duration_bounds(client, artist):
    for duration in (0, -30, 721):
        resp = client.post(
            API, json={"dateTime": iso(tomorrow_at(10)), "duration": duration}, headers=artist["headers"]
        )
        assert resp.status_code == 400, duration


def test_overlapping_slot_conflicts(client, artist, create_slot):
    create_slot(tomorrow_at(10), 60)
    for start, duration in ((tomorrow_at(10, 30), 60), (tomorrow_at(9, 30), 60), (tomorrow_at(9), 180)):
        resp = client.post(API, json={"dateTime": iso(start), "duration": duration}, headers=artist["headers"])
        assert resp.status_code == 409
        assert resp.json()["message"] == "This time slot overlaps with an existing appointment"


def test_touching_slots_are_allowed(client, artist, create_slot):
    create_slot(tomorrow_at(10), 60)
    create_slot(tomorrow_at(11), 60)
    create_slot(tomorrow_at(9), 60)


def test_overlap_is_per_artist(client, make_artist, auth, create_slot):
    create_slot(tomorrow_at(10), 60)
    other = make_artist(first_name="Other")
    resp = client.post(
        API,
        json={"dateTime": iso(tomorrow_at(10)), "duration": 60},
        headers=auth(other["user_id"], other["artist_id"]),
    )
    assert resp.status_code == 201


def test_create_slots_for_day(client, artist):
    day = tomorrow_at(0).date().isoformat()
    resp = client.post(
        f"{API}/slots",
        json={"date": day, "slots": [{"time": "10:00", "duration": 60}, {"time": "11:00", "duration": 90}]},
        headers=artist["headers"],
    )
    assert resp.status_code == 201
    assert [s["duration"] for s in resp.json()["slots"]] == [60, 90]


def test_create_slots_for_day_is_all_or_nothing(client, artist, session_factory):
    day = tomorrow_at(0).date().isoformat()
    resp = client.post(
        f"{API}/slots",
        json={"date": day, "slots": [{"time": "10:00", "duration": 60}, {"time": "10:30", "duration": 60}]},
        headers=artist["headers"],
    )
    assert resp.status_code == 409
    with session_factory() as db:
        assert db.query(AppointmentSlot).count() == 0


def test_list_available_for_day(client, artist, create_slot, customer, book):
    late = create_slot(tomorrow_at(15), 60)
    early = create_slot(tomorrow_at(9), 60)
    taken = create_slot(tomorrow_at(12), 60)
    assert book(taken, customer["headers"]).status_code == 201
    # Other days are not listed
    create_slot(tomorrow_at(10) + timedelta(days=1), 60)

    resp = client.get(
        f"{API}/available",
        params={"artistId": artist["artist_id"], "date": tomorrow_at(0).date().isoformat()},
    )
    assert resp.status_code == 200
    assert [s["slotId"] for s in resp.json()["slots"]] == [early, late]


def test_list_available_requires_arguments(client):
    assert client.get(f"{API}/available").status_code == 400
    assert client.get(f"{API}/available", params={"artistId": 1, "date": "not-a-date"}).status_code == 400


def test_list_artist_slots_shows_booking(client, artist, create_slot, customer, book):
    free = create_slot(tomorrow_at(9), 60)
    taken = create_slot(tomorrow_at(12), 60)
    booking_id = book(taken, customer["headers"]).json()["booking"]["id"]

    resp = client.get(f"{API}/artist", headers=artist["headers"])
    assert resp.status_code == 200
    slots = resp.json()["slots"]
    assert [s["id"] for s in slots] == [free, taken]
    assert slots[0]["booking"] is None
    assert slots[1]["isBooked"] is True
    assert slots[1]["booking"]["bookingId"] == booking_id


def test_list_artist_slots_forbidden_for_clients(client, customer):
    assert client.get(f"{API}/artist", headers=customer["headers"]).status_code == 403


def test_delete_slot(client, artist, create_slot):
    slot_id = create_slot()
    resp = client.delete(f"{API}/{slot_id}", headers=artist["headers"])
    assert resp.status_code == 200
    assert client.delete(f"{API}/{slot_id}", headers=artist["headers"]).status_code == 404


def test_delete_slot_of_another_artist(client, create_slot, make_artist, auth):
    slot_id = create_slot()
    other = make_artist(first_name="Other")
    resp = client.delete(f"{API}/{slot_id}", headers=auth(other["user_id"], other["artist_id"]))
    assert resp.status_code == 403


def test_delete_booked_slot_conflicts_until_cancelled(client, artist, create_slot, customer, book, session_factory):
    slot_id = create_slot()
    booking_id = book(slot_id, customer["headers"]).json()["booking"]["id"]

    assert client.delete(f"{API}/{slot_id}", headers=artist["headers"]).status_code == 409

    resp = client.patch(f"/api/v1/bookings/{booking_id}/cancel", headers=customer["headers"])
    assert resp.status_code == 200
    assert client.delete(f"{API}/{slot_id}", headers=artist["headers"]).status_code == 200

    # The cancelled booking keeps its appointment snapshot without the slot
    with session_factory() as db:
        booking = db.get(Booking, booking_id)
        assert booking.slot_id is None
        assert booking.appointment_at == tomorrow_at(10)
