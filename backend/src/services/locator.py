from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from config import Configuration
from models import Coordinate, DiningLocation, Err, LocationOutcome, Ok, RestaurantRecord
from services.foursquare import FoursquareClient
from services.geo import build_candidates
from services.scoring import LocationScorer, PlacesSearch
from services.selection import MidpointSelector, SelectionPolicy
from utils import normalize_filters


def find_best_dining_location(
    cfg: Configuration,
    coordinates: Sequence[Coordinate],
    filters: Optional[Sequence] = None,
    *,
    min_acceptable_score: Optional[float] = None,
    min_restaurant_count: Optional[int] = None,
    policy: Optional[str] = None,
    client: Optional[PlacesSearch] = None,
) -> LocationOutcome:
    """Compute the meeting point and its ranked restaurants for a group.

    Returns ``Ok(DiningLocation)`` or ``Err(reason)`` when no location could
    be selected. Provider failures never surface here; they only shrink the
    restaurant list.
    """
    if not coordinates:
        return Err("Error: No participant coordinates supplied")

    try:
        points = [c.validate() for c in coordinates]
        selection_policy = SelectionPolicy.parse(policy or cfg.selection_policy)
    except ValueError as exc:
        return Err(f"Error: {exc}")

    tokens = normalize_filters(filters)
    min_count = min_restaurant_count if min_restaurant_count is not None else cfg.min_restaurant_count

    places = client if client is not None else FoursquareClient(cfg)
    scorer = LocationScorer(places, max_workers=cfg.scoring_max_workers)
    selector = MidpointSelector(scorer, max_workers=cfg.scoring_max_workers)

    methods = cfg.midpoint_methods if selection_policy is SelectionPolicy.BALANCED else []
    candidates = build_candidates(points, methods)
    logger.info(
        "finding dining location for {} participants, {} filters, policy={}, candidates={}",
        len(points),
        len(tokens),
        selection_policy.value,
        [c.method_name for c in candidates],
    )

    result = selector.select(selection_policy, candidates, tokens, min_count)
    if result.best_score is None:
        return Err(result.best_method)

    score = result.best_score
    meets = True
    if min_acceptable_score is not None and score.total_score < min_acceptable_score:
        meets = False
        logger.warning(
            "best location score {:.2f} is below the acceptable minimum {}",
            score.total_score,
            min_acceptable_score,
        )

    return Ok(
        DiningLocation(
            midpoint=score.location,
            restaurants=list(score.best_restaurants),
            method=result.best_method,
            total_score=score.total_score,
            restaurant_count=score.restaurant_count,
            avg_distance_km=score.avg_distance_km,
            meets_min_score=meets,
        )
    )


def restaurant_payload(record: RestaurantRecord) -> Dict[str, Any]:
    """Shape stored on a session for each restaurant."""
    return {
        "rid": record.external_id,
        "name": record.name,
        "coordinates": [record.coordinates.latitude, record.coordinates.longitude],
        "address": record.address,
        "images": list(record.images),
        "categories": list(record.categories),
        "score": record.score,
        "distanceKm": record.distance_km,
    }


def location_payload(location: DiningLocation) -> Dict[str, Any]:
    restaurants: List[Dict[str, Any]] = [restaurant_payload(r) for r in location.restaurants]
    return {
        "midpoint": {"latitude": location.midpoint.latitude, "longitude": location.midpoint.longitude},
        "restaurants": restaurants,
        "method": location.method,
        "score": location.total_score,
        "restaurantCount": location.restaurant_count,
        "meetsMinScore": location.meets_min_score,
    }
