from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from config import Configuration
from models import Coordinate
from services.dining_categories import DINING_CATEGORY_IDS
from services.foursquare import FoursquareClient, PlacesError, parse_venues
from services.scoring import LocationScorer


CENTER = Coordinate(40.7580, -73.9855)


def _venue(venue_id: str, lat: float = 40.758, lng: float = -73.985, **extra) -> dict:
    raw = {
        "id": venue_id,
        "name": f"Venue {venue_id}",
        "location": {"lat": lat, "lng": lng, "formattedAddress": ["1 Main St", "New York, NY"]},
        "categories": [{"name": "Pizza Place"}, {"name": "Italian Restaurant"}],
    }
    raw.update(extra)
    return raw


def _response(status: int = 200, payload=None, text: str = "") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.text = text
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


def _client(*responses, configured: bool = True) -> tuple[FoursquareClient, MagicMock]:
    cfg = Configuration(
        foursquare_client_id="id" if configured else None,
        foursquare_client_secret="secret" if configured else None,
    )
    session = MagicMock()
    session.get.side_effect = list(responses)
    client = FoursquareClient(cfg, session=session)
    client.retry_policy.base_delay = 0.0
    return client, session


def test_parse_venues_normalizes_records() -> None:
    payload = {"response": {"venues": [_venue("a"), {"name": "no id"}, "junk", _venue("b", location=None)]}}
    venues = parse_venues(payload)
    assert [v.id for v in venues] == ["a", "b"]
    first = venues[0]
    assert first.formatted_address == "1 Main St, New York, NY"
    assert first.categories == ["Pizza Place", "Italian Restaurant"]
    assert first.coordinates == Coordinate(40.758, -73.985)
    assert venues[1].coordinates is None


@pytest.mark.parametrize("payload", [None, [], {"meta": {}}, {"response": {"venues": "nope"}}])
def test_parse_venues_rejects_bad_shapes(payload) -> None:
    with pytest.raises(PlacesError):
        parse_venues(payload)


def test_parse_venues_tolerates_malformed_record_fields() -> None:
    payload = {
        "response": {
            "venues": [
                _venue("cats", categories=7),
                _venue("mixed", categories=[{"name": "Cafe"}, "Bar", None, {"name": ""}]),
                _venue("loc", location="x"),
                _venue("addr", location={"lat": 40.0, "lng": -74.0, "formattedAddress": 5}),
                _venue("text", location={"lat": 40.0, "lng": -74.0, "formattedAddress": "9 Elm St"}),
                _venue("lat", location={"lat": "abc", "lng": -74.0}),
            ]
        }
    }
    venues = {v.id: v for v in parse_venues(payload)}

    assert list(venues) == ["cats", "mixed", "loc", "addr", "text", "lat"]
    assert venues["cats"].categories == []
    assert venues["cats"].coordinates == Coordinate(40.758, -73.985)
    assert venues["mixed"].categories == ["Cafe"]
    assert venues["loc"].coordinates is None
    assert venues["loc"].formatted_address is None
    assert venues["addr"].formatted_address is None
    assert venues["addr"].coordinates == Coordinate(40.0, -74.0)
    assert venues["text"].formatted_address == "9 Elm St"
    assert venues["lat"].coordinates is None


def test_search_builds_request_and_returns_venues() -> None:
    client, session = _client(_response(payload={"response": {"venues": [_venue("a")]}}))
    venues = client.search(CENTER, 5000, "vegan cheap")

    assert [v.id for v in venues] == ["a"]
    _, kwargs = session.get.call_args
    params = kwargs["params"]
    assert params["ll"] == "40.758,-73.9855"
    assert params["radius"] == "5000"
    assert params["query"] == "vegan cheap"
    assert params["limit"] == 50
    assert params["categoryId"].split(",") == list(DINING_CATEGORY_IDS)
    assert params["client_id"] == "id"
    assert params["client_secret"] == "secret"
    assert kwargs["timeout"] == 10


def test_search_returns_empty_on_http_error() -> None:
    client, session = _client(_response(status=400, text="bad request"))
    assert client.search(CENTER, 5000, "") == []
    assert session.get.call_count == 1


def test_search_retries_transient_errors_then_gives_up() -> None:
    client, session = _client(*[_response(status=503) for _ in range(3)])
    assert client.search(CENTER, 5000, "") == []
    assert session.get.call_count == 3


def test_search_recovers_after_transient_error() -> None:
    client, session = _client(
        _response(status=502),
        _response(payload={"response": {"venues": [_venue("a")]}}),
    )
    assert [v.id for v in client.search(CENTER, 5000, "")] == ["a"]
    assert session.get.call_count == 2


def test_search_returns_empty_on_network_failure() -> None:
    client, session = _client(*[requests.ConnectionError("down") for _ in range(3)])
    assert client.search(CENTER, 5000, "") == []


def test_search_returns_empty_on_malformed_json() -> None:
    client, _ = _client(_response(payload=ValueError("not json")))
    assert client.search(CENTER, 5000, "") == []

    client, _ = _client(_response(payload={"response": {}}))
    assert client.search(CENTER, 5000, "") == []


def test_search_without_credentials_skips_request() -> None:
    client, session = _client(configured=False)
    assert client.search(CENTER, 5000, "") == []
    session.get.assert_not_called()


def test_search_results_are_cached() -> None:
    client, session = _client(_response(payload={"response": {"venues": [_venue("a")]}}))
    first = client.search(CENTER, 5000, "vegan")
    second = client.search(CENTER, 5000, "Vegan ")
    assert [v.id for v in first] == [v.id for v in second] == ["a"]
    assert session.get.call_count == 1


def test_cache_is_shared_across_scoring_runs() -> None:
    client, session = _client(_response(payload={"response": {"venues": [_venue("a")]}}))
    scorer = LocationScorer(client, max_workers=2)

    first = scorer.score(CENTER, ["vegan"], 5000)
    second = scorer.score(CENTER, ["vegan"], 5000)

    assert first.restaurant_count == second.restaurant_count == 1
    assert session.get.call_count == 1


def test_scoring_survives_malformed_records() -> None:
    client, session = _client(
        _response(payload={"response": {"venues": [_venue("a", categories=7), _venue("x", location="x")]}}),
        _response(payload={"response": {"venues": [_venue("b", location={"lat": 40.759, "lng": -73.985, "formattedAddress": 5})]}}),
    )
    scorer = LocationScorer(client, max_workers=1)

    score = scorer.score(CENTER, ["vegan", "cheap"], 5000)

    assert session.get.call_count == 2
    assert score.restaurant_count == 2
    by_id = {r.external_id: r for r in score.best_restaurants}
    assert set(by_id) == {"a", "b"}
    assert by_id["a"].categories == []


def test_images_stub_returns_empty() -> None:
    client, _ = _client()
    assert client.get_restaurant_images("abc") == []
