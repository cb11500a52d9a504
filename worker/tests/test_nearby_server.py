import pytest
from shapely.geometry import Point

from grocery_places.core.config import ConfigError, Settings
from grocery_places.core.errors import ProtocolViolationError, RemoteServiceError, TransportError
from grocery_places.jobs import nearby_server
from grocery_places.models import Store


class DummyFuture:
    def __init__(self, fn, args):
        self._fn = fn
        self._args = args

    def result(self):
        return self._fn(*self._args)


@pytest.fixture(autouse=True)
def reset_executor(monkeypatch):
    submitted = {}

    class DummyExecutor:
        def submit(self, fn, *args):
            submitted["called"] = True
            submitted["args"] = args
            return DummyFuture(fn, args)

    settings = Settings(google_api_key="abc", default_radius_meters=1200)
    monkeypatch.setattr(nearby_server, "_executor", DummyExecutor())
    monkeypatch.setattr(nearby_server, "get_settings", lambda: settings)
    monkeypatch.setattr(
        nearby_server, "nearby_query", lambda origin, radius: [Store(name="Acme", location=Point(10.0, 20.0))]
    )
    yield submitted


def _fail_with(monkeypatch, error):
    def fail(origin, radius):
        raise error

    monkeypatch.setattr(nearby_server, "nearby_query", fail)


def test_health_endpoint(reset_executor):
    client = nearby_server.app.test_client()
    response = client.get("/healthz")
    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "ok"
    assert body["api_key_configured"] is True


def test_nearby_validates_query(reset_executor):
    client = nearby_server.app.test_client()
    assert client.get("/nearby").status_code == 400
    assert client.get("/nearby?lat=1").status_code == 400
    assert client.get("/nearby?lat=north&lng=2").status_code == 400
    assert client.get("/nearby?lat=1&lng=2&radius=wide").status_code == 400
    assert client.get("/nearby?lat=1&lng=2&radius=-5").status_code == 400
    assert "called" not in reset_executor


def test_nearby_runs_on_executor_and_returns_rows(reset_executor):
    client = nearby_server.app.test_client()
    response = client.get("/nearby?lat=20&lng=10&radius=500")

    assert response.status_code == 200
    assert response.get_json() == {"data": [{"name": "Acme", "lat": 20.0, "lng": 10.0}]}
    origin, radius = reset_executor["args"]
    assert (origin.x, origin.y) == (10.0, 20.0)
    assert radius == 500


def test_nearby_uses_default_radius(reset_executor):
    client = nearby_server.app.test_client()
    assert client.get("/nearby?lat=20&lng=10").status_code == 200
    assert reset_executor["args"][1] == 1200


@pytest.mark.parametrize(
    "error, status",
    [
        (ValueError("origin out of range"), 400),
        (ConfigError("missing key"), 503),
        (InterruptedError("stop"), 503),
        (RemoteServiceError("OVER_QUERY_LIMIT", "quota"), 502),
        (TransportError("down"), 502),
        (ProtocolViolationError("results is not a list"), 502),
    ],
)
def test_nearby_maps_errors(monkeypatch, reset_executor, error, status):
    _fail_with(monkeypatch, error)
    client = nearby_server.app.test_client()

    response = client.get("/nearby?lat=20&lng=10")

    assert response.status_code == status
    assert "data" not in response.get_json()
