from datetime import datetime, time, timedelta
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_payment_gateway
from app.core.config import Settings
from app.core.security import get_password_hash
from app.main import create_app
from app.models.artist import Artist
from app.models.lookup import City, Style
from app.models.user import User
from app.services.payments import CheckoutSession, SessionStatus
from app.utils.timeslots import utcnow

PASSWORD = "password123"
PASSWORD_HASH = get_password_hash(PASSWORD)


class FakeGateway:
    """Stands in for Stripe: sessions are created locally and marked paid on demand."""

    def __init__(self):
        self.sessions: Dict[str, SessionStatus] = {}
        self.created: List[dict] = []

    def create_checkout_session(self, product_name, amount, metadata):
        session_id = f"cs_test_{len(self.created) + 1}"
        self.created.append({"name": product_name, "amount": amount, "metadata": dict(metadata)})
        self.sessions[session_id] = SessionStatus(payment_status="unpaid", metadata=dict(metadata))
        return CheckoutSession(session_id=session_id, url=f"https://checkout.test/{session_id}")

    def mark_paid(self, session_id):
        self.sessions[session_id].payment_status = "paid"

    def retrieve_session(self, session_id):
        return self.sessions[session_id]


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        SECRET_KEY="test-secret",
        ENVIRONMENT="test",
        _env_file=None,
    )


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def app(settings, gateway):
    application = create_app(settings)
    application.dependency_overrides[get_payment_gateway] = lambda: gateway
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def session_factory(app, client):
    # Depends on client so the schema and lookup rows exist
    return app.state.SessionLocal


@pytest.fixture
def make_user(session_factory):
    counter = {"n": 0}

    def _make(first_name="Client", last_name="User", email=None) -> int:
        counter["n"] += 1
        with session_factory() as db:
            user = User(
                email=email or f"user{counter['n']}@example.com",
                password_hash=PASSWORD_HASH,
                first_name=first_name,
                last_name=f"{last_name}{counter['n']}",
                created_at=utcnow(),
            )
            db.add(user)
            db.commit()
            return user.user_id

    return _make


@pytest.fixture
def make_artist(session_factory, make_user):
    def _make(first_name="Ink", style_ids=(1,), city_name="Vilnius") -> Dict[str, int]:
        user_id = make_user(first_name=first_name, last_name="Artist")
        with session_factory() as db:
            city = db.query(City).filter(City.name == city_name).first()
            if city is None:
                city = City(name=city_name, country_name="Lithuania")
                db.add(city)
                db.flush()
            artist = Artist(
                user_id=user_id,
                city_id=city.city_id,
                artist_description="Fine line and blackwork",
                created_at=utcnow(),
            )
            artist.styles = db.query(Style).filter(Style.style_id.in_(style_ids)).all()
            db.add(artist)
            db.commit()
            return {"user_id": user_id, "artist_id": artist.artist_id, "city_id": city.city_id}

    return _make


@pytest.fixture
def auth(app):
    """Bearer headers for a user id, as the login endpoint would issue them."""

    def _headers(user_id: int, artist_id: Optional[int] = None) -> Dict[str, str]:
        token = app.state.identity.issue(user_id, is_artist=artist_id is not None, artist_id=artist_id)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def artist(make_artist, auth):
    info = make_artist()
    info["headers"] = auth(info["user_id"], info["artist_id"])
    return info


@pytest.fixture
def customer(make_user, auth):
    user_id = make_user()
    return {"user_id": user_id, "headers": auth(user_id)}


def tomorrow_at(hour: int, minute: int = 0) -> datetime:
    return datetime.combine(utcnow().date() + timedelta(days=1), time(hour, minute))


def iso(value: datetime) -> str:
    return value.isoformat() + "Z"


@pytest.fixture
def create_slot(client, artist):
    def _create(start: Optional[datetime] = None, duration: int = 60, headers=None):
        resp = client.post(
            "/api/v1/appointments",
            json={"dateTime": iso(start or tomorrow_at(10)), "duration": duration},
            headers=headers or artist["headers"],
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["slot"]["id"]

    return _create


@pytest.fixture
def book(client):
    def _book(slot_id: int, headers, size_id: int = 1, placement_id: int = 1):
        return client.post(
            "/api/v1/bookings",
            json={"slotId": slot_id, "sizeId": size_id, "placementId": placement_id},
            headers=headers,
        )

    return _book
