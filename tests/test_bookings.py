from decimal import Decimal

import pytest

from app.core import errors
from app.models.appointment_slot import AppointmentSlot
from app.models.booking import STATUS_IDS, Booking, BookingStatus
from app.schemas.booking import BookingCreate
from app.services.bookings import BookingService
from tests.conftest import tomorrow_at

API = "/api/v1/bookings"


def _slot(session_factory, slot_id):
    with session_factory() as db:
        return db.get(AppointmentSlot, slot_id)


def _set_price(client, booking_id, headers, price=100):
    return client.patch(f"{API}/{booking_id}/price", json={"price": price}, headers=headers)


def _respond(client, booking_id, headers, action):
    return client.patch(f"{API}/{booking_id}/status", json={"action": action}, headers=headers)


@pytest.fixture
def booking(create_slot, customer, book):
    slot_id = create_slot()
    resp = book(slot_id, customer["headers"])
    assert resp.status_code == 201, resp.text
    return {"id": resp.json()["booking"]["id"], "slot_id": slot_id}


# ---------------------------------------------------------------------------
# End-to-end
# ---------------------------------------------------------------------------


def test_full_booking_lifecycle(client, artist, customer, create_slot, book, make_user, auth, session_factory):
    slot_id = create_slot(tomorrow_at(10), 60)

    resp = book(slot_id, customer["headers"])
    assert resp.status_code == 201
    created = resp.json()["booking"]
    assert created["statusId"] == 1
    assert created["status"] == "Pending"
    assert created["appointment"]["slotId"] == slot_id
    assert created["appointment"]["duration"] == 60
    assert created["artist"]["artistId"] == artist["artist_id"]
    assert _slot(session_factory, slot_id).is_booked is True

    resp = _set_price(client, created["id"], artist["headers"], 100)
    assert resp.status_code == 200
    quoted = resp.json()["booking"]
    assert quoted["statusId"] == 2
    assert Decimal(quoted["details"]["price"]) == Decimal("100")
    assert Decimal(quoted["details"]["commissionAmount"]) == Decimal("10.00")

    resp = _respond(client, created["id"], customer["headers"], "confirm")
    assert resp.status_code == 200
    assert resp.json()["booking"]["statusId"] == 3
    assert _slot(session_factory, slot_id).is_booked is True

    second = make_user(first_name="Second")
    resp = book(slot_id, auth(second))
    assert resp.status_code == 409
    assert resp.json()["success"] is False


def test_confirm_without_price(client, booking, customer):
    resp = _respond(client, booking["id"], customer["headers"], "confirm")
    assert resp.status_code == 400
    assert "price not set" in resp.json()["message"]


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


def test_create_unknown_slot(book, customer):
    assert book(9999, customer["headers"]).status_code == 404


def test_create_requires_token(client, create_slot):
    slot_id = create_slot()
    resp = client.post(API, json={"slotId": slot_id, "sizeId": 1, "placementId": 1})
    assert resp.status_code == 401


def test_artist_cannot_book_own_slot(book, create_slot, artist):
    resp = book(create_slot(), artist["headers"])
    assert resp.status_code == 400


def test_create_rejects_past_slot(book, create_slot, customer, session_factory):
    slot_id = create_slot()
    with session_factory() as db:
        slot = db.get(AppointmentSlot, slot_id)
        slot.date_time = tomorrow_at(10).replace(year=2000)
        db.commit()
    assert book(slot_id, customer["headers"]).status_code == 400


def test_create_rejects_unknown_size_or_placement(book, create_slot, customer, session_factory):
    slot_id = create_slot()
    assert book(slot_id, customer["headers"], size_id=999).status_code == 400
    assert book(slot_id, customer["headers"], placement_id=999).status_code == 400
    assert _slot(session_factory, slot_id).is_booked is False


def test_create_stores_optional_fields(client, create_slot, customer):
    slot_id = create_slot()
    resp = client.post(
        API,
        json={
            "slotId": slot_id,
            "sizeId": 2,
            "placementId": 1,
            "isColor": True,
            "referenceURL": "https://example.com/ref.png",
            "comment": "Small rose",
        },
        headers=customer["headers"],
    )
    assert resp.status_code == 201
    details = resp.json()["booking"]["details"]
    assert details["isColor"] is True
    assert details["referenceURL"] == "https://example.com/ref.png"
    assert details["size"] == "Medium"
    assert details["price"] is None


# ---------------------------------------------------------------------------
# Price
# ---------------------------------------------------------------------------


def test_set_price_only_once(client, booking, artist):
    assert _set_price(client, booking["id"], artist["headers"], 100).status_code == 200
    resp = _set_price(client, booking["id"], artist["headers"], 120)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Price is already set"


@pytest.mark.parametrize("price", [None, 0, -5])
def test_set_price_requires_positive_price(client, booking, artist, price):
    assert _set_price(client, booking["id"], artist["headers"], price).status_code == 400


def test_set_price_only_by_artist(client, booking, customer):
    assert _set_price(client, booking["id"], customer["headers"]).status_code == 403


def test_set_price_unknown_booking(client, artist):
    assert _set_price(client, 9999, artist["headers"]).status_code == 404


def test_set_price_after_cancel_conflicts(client, booking, artist, customer):
    client.patch(f"{API}/{booking['id']}/cancel", headers=customer["headers"])
    assert _set_price(client, booking["id"], artist["headers"]).status_code == 409


def test_commission_is_rounded(client, booking, artist):
    resp = _set_price(client, booking["id"], artist["headers"], "123.45")
    details = resp.json()["booking"]["details"]
    assert Decimal(details["commissionAmount"]) == Decimal("12.35")


# ---------------------------------------------------------------------------
# Respond to quote
# ---------------------------------------------------------------------------


def test_decline_frees_slot(client, booking, artist, customer, session_factory):
    _set_price(client, booking["id"], artist["headers"])
    resp = _respond(client, booking["id"], customer["headers"], "decline")
    assert resp.status_code == 200
    assert resp.json()["booking"]["statusId"] == 4
    assert _slot(session_factory, booking["slot_id"]).is_booked is False


def test_confirm_only_by_client(client, booking, artist):
    _set_price(client, booking["id"], artist["headers"])
    assert _respond(client, booking["id"], artist["headers"], "confirm").status_code == 403


def test_respond_twice_conflicts(client, booking, artist, customer):
    _set_price(client, booking["id"], artist["headers"])
    assert _respond(client, booking["id"], customer["headers"], "confirm").status_code == 200
    assert _respond(client, booking["id"], customer["headers"], "decline").status_code == 409


def test_respond_with_unknown_action(client, booking, customer):
    assert _respond(client, booking["id"], customer["headers"], "maybe").status_code == 400


# ---------------------------------------------------------------------------
# Cancel
# ---------------------------------------------------------------------------


def test_cancel_confirmed_booking_frees_slot(client, booking, artist, customer, session_factory):
    _set_price(client, booking["id"], artist["headers"])
    _respond(client, booking["id"], customer["headers"], "confirm")

    resp = client.patch(f"{API}/{booking['id']}/cancel", headers=artist["headers"])
    assert resp.status_code == 200
    assert resp.json()["booking"]["statusId"] == 5
    assert _slot(session_factory, booking["slot_id"]).is_booked is False


def test_cancel_twice_is_noop(client, booking, customer):
    assert client.patch(f"{API}/{booking['id']}/cancel", headers=customer["headers"]).status_code == 200
    resp = client.patch(f"{API}/{booking['id']}/cancel", headers=customer["headers"])
    assert resp.status_code == 200
    assert resp.json()["booking"]["statusId"] == 5


def test_cancel_declined_booking_leaves_rebooked_slot(client, booking, artist, customer, make_user, auth, book, session_factory):
    _set_price(client, booking["id"], artist["headers"])
    _respond(client, booking["id"], customer["headers"], "decline")

    other = auth(make_user(first_name="Other"))
    assert book(booking["slot_id"], other).status_code == 201

    resp = client.patch(f"{API}/{booking['id']}/cancel", headers=customer["headers"])
    assert resp.status_code == 200
    assert resp.json()["booking"]["statusId"] == 5
    assert _slot(session_factory, booking["slot_id"]).is_booked is True


def test_cancel_by_stranger(client, booking, make_user, auth):
    assert client.patch(f"{API}/{booking['id']}/cancel", headers=auth(make_user())).status_code == 403


def test_cancelled_slot_can_be_booked_again(client, booking, customer, book, make_user, auth):
    client.patch(f"{API}/{booking['id']}/cancel", headers=customer["headers"])
    assert book(booking["slot_id"], auth(make_user())).status_code == 201


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def test_get_booking_projection(client, booking, artist, customer):
    resp = client.get(f"{API}/{booking['id']}", headers=customer["headers"])
    assert resp.status_code == 200
    body = resp.json()["booking"]
    assert body["client"]["userId"] == customer["user_id"]
    assert body["artist"]["city"] == "Vilnius"
    assert body["artist"]["email"].endswith("@example.com")
    assert body["review"] is None

    assert client.get(f"{API}/{booking['id']}", headers=artist["headers"]).status_code == 200


def test_get_booking_forbidden_and_missing(client, booking, make_user, auth, customer):
    assert client.get(f"{API}/{booking['id']}", headers=auth(make_user())).status_code == 403
    assert client.get(f"{API}/9999", headers=customer["headers"]).status_code == 404
    assert client.get(f"{API}/abc", headers=customer["headers"]).status_code == 400


def test_list_artist_bookings_newest_first(client, artist, customer, create_slot, book):
    first = book(create_slot(tomorrow_at(9)), customer["headers"]).json()["booking"]["id"]
    second = book(create_slot(tomorrow_at(11)), customer["headers"]).json()["booking"]["id"]

    resp = client.get(f"{API}/artist", headers=artist["headers"])
    assert resp.status_code == 200
    bookings = resp.json()["bookings"]
    assert [b["id"] for b in bookings] == [second, first]
    assert bookings[0]["client"]["userId"] == customer["user_id"]

    assert client.get(f"{API}/artist", headers=customer["headers"]).status_code == 403


def test_list_my_bookings_with_status_filter(client, artist, customer, create_slot, book):
    kept = book(create_slot(tomorrow_at(9)), customer["headers"]).json()["booking"]["id"]
    dropped = book(create_slot(tomorrow_at(11)), customer["headers"]).json()["booking"]["id"]
    client.patch(f"{API}/{dropped}/cancel", headers=customer["headers"])

    resp = client.get(f"{API}/mine", headers=customer["headers"])
    assert [b["id"] for b in resp.json()["bookings"]] == [dropped, kept]

    resp = client.get(f"{API}/mine", params={"status": "cancelled"}, headers=customer["headers"])
    assert [b["id"] for b in resp.json()["bookings"]] == [dropped]


# ---------------------------------------------------------------------------
# Guards against concurrent writers
# ---------------------------------------------------------------------------


def test_booked_slot_rejects_second_request(session_factory, settings, create_slot, customer, make_user):
    slot_id = create_slot()
    data = BookingCreate(slot_id=slot_id, size_id=1, placement_id=1)
    with session_factory() as db:
        BookingService(db, settings).create(customer["user_id"], data)
    with session_factory() as db:
        with pytest.raises(errors.Conflict):
            BookingService(db, settings).create(make_user(), data)
    with session_factory() as db:
        active = db.query(Booking).filter(
            Booking.slot_id == slot_id, Booking.status_id == STATUS_IDS[BookingStatus.REQUESTED]
        )
        assert active.count() == 1


def test_slot_reservation_is_guarded(session_factory, settings, create_slot):
    slot_id = create_slot()
    with session_factory() as db:
        service = BookingService(db, settings)
        service._reserve_slot(slot_id)
        with pytest.raises(errors.Conflict):
            service._reserve_slot(slot_id)
        db.rollback()


def test_transition_guarded_on_loaded_status(session_factory, settings, booking, artist):
    with session_factory() as db:
        stale = db.get(Booking, booking["id"])
        assert stale.status == BookingStatus.REQUESTED

        # Another writer cancels the booking after it was read
        with session_factory() as other:
            other.get(Booking, booking["id"]).status = BookingStatus.CANCELLED
            other.commit()

        with pytest.raises(errors.Conflict):
            BookingService(db, settings)._transition(stale, BookingStatus.QUOTED, price=Decimal("50"))
        db.rollback()


def test_active_bookings_per_slot_unique_index(session_factory, booking, customer):
    from sqlalchemy.exc import IntegrityError

    with session_factory() as db:
        original = db.get(Booking, booking["id"])
        duplicate = Booking(
            user_id=customer["user_id"],
            artist_id=original.artist_id,
            slot_id=original.slot_id,
            status_id=STATUS_IDS[BookingStatus.REQUESTED],
            size_id=1,
            placement_id=1,
            appointment_at=original.appointment_at,
            duration=original.duration,
        )
        db.add(duplicate)
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()
