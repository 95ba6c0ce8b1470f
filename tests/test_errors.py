from fastapi.testclient import TestClient

from app.core import errors
from app.core.config import Settings
from app.main import create_app


def _app_with_failing_routes(environment: str):
    app = create_app(Settings(DATABASE_URL="sqlite://", ENVIRONMENT=environment, _env_file=None))

    @app.get("/boom")
    def boom():
        raise RuntimeError("disk on fire")

    @app.get("/conflict")
    def conflict():
        raise errors.Conflict("Already there", detail="uq_something violated")

    return app


def test_unknown_route_envelope(client):
    resp = client.get("/api/v1/nope")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Route not found"}


def test_app_error_hides_detail_outside_development():
    with TestClient(_app_with_failing_routes("production"), raise_server_exceptions=False) as client:
        resp = client.get("/conflict")
        assert resp.status_code == 409
        assert resp.json() == {"success": False, "message": "Already there"}

        resp = client.get("/boom")
        assert resp.status_code == 500
        assert resp.json() == {"success": False, "message": "Internal server error"}


def test_development_exposes_error_detail():
    with TestClient(_app_with_failing_routes("development"), raise_server_exceptions=False) as client:
        assert client.get("/conflict").json()["error"] == "uq_something violated"
        body = client.get("/boom").json()
        assert body["message"] == "Internal server error"
        assert body["error"] == "disk on fire"


def test_root(client):
    assert client.get("/").json()["success"] is True
