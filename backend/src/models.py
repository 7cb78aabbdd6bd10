"""Data models for the dining midpoint engine."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def validate(self) -> "Coordinate":
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")
        return self

    def as_pair(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class CandidateMidpoint:
    method_name: str
    coordinates: Coordinate


@dataclass
class Venue:
    """A venue as returned by the places provider, before scoring."""

    id: str
    name: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    formatted_address: Optional[str] = None
    categories: list[str] = field(default_factory=list)

    @property
    def coordinates(self) -> Optional[Coordinate]:
        if self.lat is None or self.lng is None:
            return None
        return Coordinate(float(self.lat), float(self.lng))


@dataclass
class RestaurantRecord:
    external_id: str
    name: str
    address: Optional[str]
    score: float
    distance_km: float
    coordinates: Coordinate
    images: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)


@dataclass
class LocationScore:
    location: Coordinate
    total_score: float
    restaurant_count: int
    avg_distance_km: float
    best_restaurants: List[RestaurantRecord] = field(default_factory=list)

    @classmethod
    def empty(cls, location: Coordinate) -> "LocationScore":
        return cls(location=location, total_score=0.0, restaurant_count=0, avg_distance_km=math.inf)

    @property
    def has_data(self) -> bool:
        return self.restaurant_count > 0


@dataclass
class SelectionResult:
    best_score: Optional[LocationScore]
    best_method: str

    @property
    def is_error(self) -> bool:
        return self.best_score is None


@dataclass
class DiningLocation:
    midpoint: Coordinate
    restaurants: List[RestaurantRecord]
    method: str
    total_score: float
    restaurant_count: int
    avg_distance_km: float
    meets_min_score: bool = True


@dataclass(frozen=True)
class Ok:
    value: DiningLocation


@dataclass(frozen=True)
class Err:
    reason: str


LocationOutcome = Union[Ok, Err]
