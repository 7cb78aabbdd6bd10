from __future__ import annotations

from typing import List

import pytest
from fastapi.testclient import TestClient

import main
from models import Coordinate, Venue


class FakeClient:
    def __init__(self, cfg) -> None:
        self.cfg = cfg
        self.searches = 0

    def search(self, center: Coordinate, radius_meters: int, query: str = "") -> List[Venue]:
        self.searches += 1
        return [
            Venue(id=f"v{i}", name=f"Diner {i}", lat=center.latitude + 0.002 * i, lng=center.longitude, categories=["Diner"])
            for i in range(6)
        ]

    def get_restaurant_images(self, venue_id: str) -> List[str]:
        return []


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setenv("FOURSQUARE_CLIENT_ID", "id")
    monkeypatch.setenv("FOURSQUARE_CLIENT_SECRET", "secret")
    monkeypatch.setenv("SCORING_MAX_WORKERS", "1")
    monkeypatch.setattr(main.app.state, "places_client", FakeClient(None), raising=False)
    return TestClient(main.app)


BODY = {
    "coordinates": [[40.70, -74.00], [40.80, -73.90]],
    "filters": [["vegan"], ["cheap"]],
    "options": {"minRestaurantCount": 3, "policy": "balanced"},
}


def test_midpoint_returns_location(client: TestClient) -> None:
    resp = client.post("/midpoint", json=BODY)
    assert resp.status_code == 200
    data = resp.json()
    assert 40.70 < data["midpoint"]["latitude"] < 40.80
    assert len(data["restaurants"]) == 6
    assert data["restaurants"][0]["rid"] == "v0"
    assert data["restaurants"][0]["categories"] == ["Diner"]
    assert data["method"] in {"geometric", "median"}
    assert data["meetsMinScore"] is True


def test_requests_share_one_places_client(client: TestClient) -> None:
    fake = main.app.state.places_client
    assert client.post("/midpoint", json=BODY).status_code == 200
    after_first = fake.searches
    assert client.post("/midpoint", json=BODY).status_code == 200

    assert main.app.state.places_client is fake
    assert after_first > 0
    assert fake.searches == 2 * after_first


def test_midpoint_requires_two_coordinates(client: TestClient) -> None:
    resp = client.post("/midpoint", json={"coordinates": [[40.7, -74.0]]})
    assert resp.status_code == 422


@pytest.mark.parametrize("pair", [[91.0, 0.0], [0.0, 181.0], [1.0]])
def test_midpoint_rejects_bad_coordinates(client: TestClient, pair) -> None:
    resp = client.post("/midpoint", json={"coordinates": [pair, [0.0, 0.0]]})
    assert resp.status_code == 422


@pytest.mark.parametrize(
    "options",
    [{"minAcceptableScore": 150}, {"minRestaurantCount": 0}, {"policy": "fastest"}],
)
def test_midpoint_rejects_bad_options(client: TestClient, options) -> None:
    resp = client.post("/midpoint", json={"coordinates": BODY["coordinates"], "options": options})
    assert resp.status_code == 422


def test_midpoint_min_score_flag(client: TestClient) -> None:
    body = dict(BODY, options={"minAcceptableScore": 100})
    resp = client.post("/midpoint", json=body)
    assert resp.status_code == 200
    assert resp.json()["meetsMinScore"] is False


def test_midpoint_without_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FOURSQUARE_CLIENT_ID", raising=False)
    monkeypatch.delenv("FOURSQUARE_CLIENT_SECRET", raising=False)
    resp = TestClient(main.app).post("/midpoint", json=BODY)
    assert resp.status_code == 400


def test_place_images_stub(client: TestClient) -> None:
    resp = client.get("/places/abc123/images")
    assert resp.status_code == 200
    assert resp.json() == {"id": "abc123", "images": []}


def test_healthz(client: TestClient) -> None:
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "places_configured": True}
