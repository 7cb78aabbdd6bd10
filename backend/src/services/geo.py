from __future__ import annotations

import math
import statistics
from typing import Callable, Dict, Iterable, List, Sequence

from loguru import logger

from models import CandidateMidpoint, Coordinate
from utils import haversine_km


GEOMETRIC = "geometric"
MEDIAN = "median"


def distance_km(a: Coordinate, b: Coordinate) -> float:
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def geometric_midpoint(points: Sequence[Coordinate]) -> Coordinate:
    """Centroid of the points on the sphere.

    Each point is converted to a 3D unit vector, the vectors are averaged and
    the mean is projected back to latitude/longitude, so groups straddling the
    antimeridian still get a sensible center.
    """
    if not points:
        raise ValueError("at least one coordinate is required")
    if len(points) == 1:
        return points[0]

    x = y = z = 0.0
    for p in points:
        lat = math.radians(p.latitude)
        lon = math.radians(p.longitude)
        x += math.cos(lat) * math.cos(lon)
        y += math.cos(lat) * math.sin(lon)
        z += math.sin(lat)
    n = float(len(points))
    x, y, z = x / n, y / n, z / n

    lon = math.atan2(y, x)
    hyp = math.sqrt(x * x + y * y)
    lat = math.atan2(z, hyp)
    return Coordinate(math.degrees(lat), math.degrees(lon))


def median_midpoint(points: Sequence[Coordinate]) -> Coordinate:
    """Coordinate-wise median; one far-away participant does not drag it."""
    if not points:
        raise ValueError("at least one coordinate is required")
    return Coordinate(
        statistics.median(p.latitude for p in points),
        statistics.median(p.longitude for p in points),
    )


MIDPOINT_METHODS: Dict[str, Callable[[Sequence[Coordinate]], Coordinate]] = {
    GEOMETRIC: geometric_midpoint,
    MEDIAN: median_midpoint,
}


def build_candidates(points: Sequence[Coordinate], methods: Iterable[str] = (GEOMETRIC,)) -> List[CandidateMidpoint]:
    """Candidate midpoints for the requested methods, geometric always first."""
    ordered: list[str] = [GEOMETRIC]
    for name in methods:
        if name not in MIDPOINT_METHODS:
            logger.warning("unknown midpoint method {}, skipping", name)
            continue
        if name not in ordered:
            ordered.append(name)
    return [CandidateMidpoint(method_name=name, coordinates=MIDPOINT_METHODS[name](points)) for name in ordered]
