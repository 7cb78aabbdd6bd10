from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Protocol, Sequence

from loguru import logger

from models import Coordinate, LocationScore, RestaurantRecord, Venue
from services.geo import distance_km
from utils import normalize_filters


SCORE_SCALE = 100.0
HALF_SCORE_KM = 5.0
DEFAULT_TOP_N = 25


class PlacesSearch(Protocol):
    def search(self, center: Coordinate, radius_meters: int, query: str = "") -> List[Venue]:
        ...


def build_filter_combinations(filters: Optional[Sequence]) -> List[str]:
    """Cumulative prefixes of the filter list, each joined into one query.

    ``["vegan", "cheap", "italian"]`` gives ``["vegan", "vegan cheap",
    "vegan cheap italian"]``. No filters gives a single unfiltered query.
    """
    tokens = normalize_filters(filters)
    if not tokens:
        return [""]
    return [" ".join(tokens[: i + 1]) for i in range(len(tokens))]


def proximity_score(distance: float) -> float:
    """100 at the center, 50 at 5 km, strictly decreasing with distance."""
    return SCORE_SCALE / (1.0 + distance / HALF_SCORE_KM)


class LocationScorer:
    def __init__(self, places: PlacesSearch, *, top_n: int = DEFAULT_TOP_N, max_workers: int = 4) -> None:
        self.places = places
        self.top_n = max(1, top_n)
        self.max_workers = max(1, max_workers)

    def _fetch_all(self, center: Coordinate, combinations: List[str], radius_meters: int) -> List[List[Venue]]:
        def run(query: str) -> List[Venue]:
            logger.info("searching venues for filter combination '{}'", query or "all")
            return self.places.search(center, radius_meters, query)

        if self.max_workers == 1 or len(combinations) == 1:
            return [run(q) for q in combinations]
        workers = min(self.max_workers, len(combinations))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # map keeps combination order, so earlier combinations win on duplicate ids
            return list(pool.map(run, combinations))

    def score(self, center: Coordinate, filters: Optional[Sequence], radius_meters: int) -> LocationScore:
        logger.info("scoring location {} with radius {}m", center.as_pair(), radius_meters)
        combinations = build_filter_combinations(filters)
        batches = self._fetch_all(center, combinations, radius_meters)

        seen: set[str] = set()
        found: list[RestaurantRecord] = []
        for venues in batches:
            for venue in venues:
                if venue.id in seen:
                    continue
                seen.add(venue.id)
                coords = venue.coordinates
                if coords is None:
                    continue
                dist = distance_km(center, coords)
                found.append(
                    RestaurantRecord(
                        external_id=venue.id,
                        name=venue.name,
                        address=venue.formatted_address,
                        score=proximity_score(dist),
                        distance_km=dist,
                        coordinates=coords,
                        categories=list(venue.categories),
                    )
                )

        if not found:
            logger.warning("no restaurants found around {}", center.as_pair())
            return LocationScore.empty(center)

        found.sort(key=lambda r: r.score, reverse=True)
        result = LocationScore(
            location=center,
            total_score=sum(r.score for r in found) / len(found),
            restaurant_count=len(found),
            avg_distance_km=sum(r.distance_km for r in found) / len(found),
            best_restaurants=found[: self.top_n],
        )
        logger.info(
            "location scored: {} restaurants, score {:.2f}, avg distance {:.2f} km",
            result.restaurant_count,
            result.total_score,
            result.avg_distance_km,
        )
        return result
