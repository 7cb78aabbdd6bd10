from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import requests
from loguru import logger

from config import Configuration
from models import Coordinate, Venue
from services.dining_categories import category_param


class PlacesError(RuntimeError):
    pass


@dataclass
class _RetryPolicy:
    retries: int = 2
    base_delay: float = 0.5


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_venues(payload: Any) -> List[Venue]:
    """Normalize a venues/search payload into Venue records.

    Raises PlacesError when the payload does not have the expected
    ``{"response": {"venues": [...]}}`` shape.
    """
    if not isinstance(payload, dict):
        raise PlacesError("unexpected payload type")
    response = payload.get("response")
    if not isinstance(response, dict):
        raise PlacesError("payload has no response object")
    venues = response.get("venues")
    if not isinstance(venues, list):
        raise PlacesError("payload has no venues list")

    results: list[Venue] = []
    for raw in venues:
        if not isinstance(raw, dict):
            continue
        venue_id = raw.get("id")
        if not venue_id:
            continue
        location = raw.get("location") or {}
        if not isinstance(location, dict):
            location = {}
        formatted = location.get("formattedAddress")
        if isinstance(formatted, list):
            address = ", ".join(str(x) for x in formatted if x) or None
        elif isinstance(formatted, str):
            address = formatted or None
        else:
            address = None
        categories: list[str] = []
        raw_categories = raw.get("categories")
        if not isinstance(raw_categories, list):
            raw_categories = []
        for cat in raw_categories:
            if isinstance(cat, dict) and cat.get("name"):
                categories.append(str(cat["name"]))
        results.append(
            Venue(
                id=str(venue_id),
                name=str(raw.get("name") or "Restaurant"),
                lat=_to_float(location.get("lat")),
                lng=_to_float(location.get("lng")),
                formatted_address=address,
                categories=categories,
            )
        )
    return results


class FoursquareClient:
    """Venue search against the Foursquare v2 API.

    ``search`` never raises: provider and network failures are logged and
    reported as an empty result, so one bad query cannot abort a scoring run
    that issues many.
    """

    SEARCH_PATH = "/v2/venues/search"

    def __init__(self, cfg: Configuration, session: Optional[requests.Session] = None) -> None:
        self.cfg = cfg
        self.base = cfg.foursquare_base_url.rstrip("/")
        self.session = session or requests.Session()
        self.retry_policy = _RetryPolicy()
        self._cache_ttl = cfg.places_cache_ttl
        self._cache_max = 256
        self._search_cache: OrderedDict[str, Tuple[float, List[Venue]]] = OrderedDict()
        # one client serves every scoring worker thread
        self._cache_lock = threading.Lock()
        if not cfg.has_foursquare:
            logger.error("Foursquare client id or secret is not configured; venue searches will return no results")

    def _cache_get(self, key: str) -> Optional[List[Venue]]:
        with self._cache_lock:
            entry = self._search_cache.get(key)
            if not entry:
                return None
            ts, value = entry
            if time.time() - ts > self._cache_ttl:
                self._search_cache.pop(key, None)
                return None
            self._search_cache.move_to_end(key)
            return value

    def _cache_set(self, key: str, value: List[Venue]) -> None:
        with self._cache_lock:
            if key not in self._search_cache and len(self._search_cache) >= self._cache_max:
                self._search_cache.popitem(last=False)
            self._search_cache[key] = (time.time(), value)

    def _get(self, path: str, params: dict) -> Any:
        url = f"{self.base}{path}"
        headers = {"Accept": "application/json"}
        params = {
            **params,
            "client_id": self.cfg.foursquare_client_id,
            "client_secret": self.cfg.foursquare_client_secret,
            "v": self.cfg.foursquare_api_version,
        }
        policy = self.retry_policy
        attempt = 0
        while True:
            attempt += 1
            try:
                resp = self.session.get(url, headers=headers, params=params, timeout=self.cfg.foursquare_timeout)
            except requests.RequestException as exc:
                if attempt <= policy.retries:
                    time.sleep(policy.base_delay * attempt)
                    continue
                raise PlacesError(f"request error: {exc}") from exc

            if resp.status_code in (429, 500, 502, 503, 504):
                if attempt <= policy.retries:
                    time.sleep(policy.base_delay * attempt)
                    continue
                raise PlacesError(f"upstream {resp.status_code}: {resp.text[:300]}")

            if not resp.ok:
                raise PlacesError(f"upstream {resp.status_code}: {resp.text[:300]}")

            try:
                return resp.json()
            except ValueError as exc:
                raise PlacesError("invalid json response") from exc

    def search(self, center: Coordinate, radius_meters: int, query: str = "") -> List[Venue]:
        if not self.cfg.has_foursquare:
            logger.warning("skipping venue search for query '{}': credentials missing", query or "all")
            return []

        key = f"search:{center.latitude:.5f},{center.longitude:.5f}:{int(radius_meters)}:{query.strip().lower()}"
        cached = self._cache_get(key)
        if cached is not None:
            return list(cached)

        params = {
            "ll": f"{center.latitude},{center.longitude}",
            "radius": str(int(radius_meters)),
            "limit": self.cfg.page_size,
            "query": query or "",
            "categoryId": category_param(),
        }
        try:
            payload = self._get(self.SEARCH_PATH, params)
            venues = parse_venues(payload)
        except (PlacesError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("venue search failed for query '{}' at {}: {}", query or "all", center.as_pair(), exc)
            return []

        logger.debug("venue search query='{}' radius={}m found {} venues", query or "all", radius_meters, len(venues))
        self._cache_set(key, list(venues))
        return venues

    def get_restaurant_images(self, venue_id: str) -> List[str]:
        """Photo URLs for a venue. Not wired to the photos endpoint yet; always empty."""
        logger.warning("image fetching is not implemented for venue {}", venue_id)
        return []
