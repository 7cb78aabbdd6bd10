"""Pick one meeting location out of the candidate midpoints.

Two policies are available:

* ``balanced``: score every candidate at 5 km, subtract one point per kilometer
  the candidate sits away from the geometric center, keep the best, and widen
  the winner to 15 km when it has too few restaurants.
* ``single``: score only the geometric midpoint at 10 km and widen to 25 km
  when sparse.

A candidate list without a ``geometric`` entry is a caller error and is
reported through ``SelectionResult.best_method``, not raised.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from enum import Enum
from typing import List, Optional, Sequence

from loguru import logger

from models import CandidateMidpoint, LocationScore, SelectionResult
from services.geo import GEOMETRIC, distance_km
from services.scoring import LocationScorer


MISSING_GEOMETRIC = "Error: Geometric midpoint not found"
EXPANDED_SUFFIX = " (Expanded Search)"

SINGLE_RADIUS_M = 10_000
SINGLE_EXPANDED_RADIUS_M = 25_000
SINGLE_TOP_N = 10

BALANCED_RADIUS_M = 5_000
BALANCED_EXPANDED_RADIUS_M = 15_000
FAIRNESS_PENALTY_PER_KM = 1.0


class SelectionPolicy(str, Enum):
    BALANCED = "balanced"
    SINGLE = "single"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SelectionPolicy":
        if not value:
            return cls.BALANCED
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown selection policy: {value}") from None


def _find_geometric(candidates: Sequence[CandidateMidpoint]) -> Optional[CandidateMidpoint]:
    for candidate in candidates:
        if candidate.method_name == GEOMETRIC:
            return candidate
    return None


class MidpointSelector:
    def __init__(self, scorer: LocationScorer, *, max_workers: int = 4) -> None:
        self.scorer = scorer
        self.max_workers = max(1, max_workers)

    def select(
        self,
        policy: SelectionPolicy,
        candidates: Sequence[CandidateMidpoint],
        filters: Optional[Sequence],
        min_restaurant_count: int = 5,
    ) -> SelectionResult:
        if policy is SelectionPolicy.SINGLE:
            return self.select_single(candidates, filters, min_restaurant_count)
        return self.select_balanced(candidates, filters, min_restaurant_count)

    def select_single(
        self,
        candidates: Sequence[CandidateMidpoint],
        filters: Optional[Sequence],
        min_restaurant_count: int = 5,
    ) -> SelectionResult:
        geometric = _find_geometric(candidates)
        if geometric is None:
            logger.warning("selection aborted: no geometric midpoint among {} candidates", len(candidates))
            return SelectionResult(best_score=None, best_method=MISSING_GEOMETRIC)

        score = self.scorer.score(geometric.coordinates, filters, SINGLE_RADIUS_M)
        method = geometric.method_name
        if score.restaurant_count < min_restaurant_count:
            logger.info(
                "initial {}km search found only {} restaurants, expanding to {}km",
                SINGLE_RADIUS_M // 1000,
                score.restaurant_count,
                SINGLE_EXPANDED_RADIUS_M // 1000,
            )
            score = self.scorer.score(geometric.coordinates, filters, SINGLE_EXPANDED_RADIUS_M)
            method = f"{method}{EXPANDED_SUFFIX}"

        score = replace(score, best_restaurants=score.best_restaurants[:SINGLE_TOP_N])
        return SelectionResult(best_score=score, best_method=method)

    def _score_candidates(
        self, candidates: Sequence[CandidateMidpoint], filters: Optional[Sequence]
    ) -> List[LocationScore]:
        def run(candidate: CandidateMidpoint) -> LocationScore:
            return self.scorer.score(candidate.coordinates, filters, BALANCED_RADIUS_M)

        if self.max_workers == 1 or len(candidates) == 1:
            return [run(c) for c in candidates]
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(candidates))) as pool:
            return list(pool.map(run, candidates))

    def select_balanced(
        self,
        candidates: Sequence[CandidateMidpoint],
        filters: Optional[Sequence],
        min_restaurant_count: int = 5,
    ) -> SelectionResult:
        geometric = _find_geometric(candidates)
        if geometric is None:
            logger.warning("selection aborted: no geometric midpoint among {} candidates", len(candidates))
            return SelectionResult(best_score=None, best_method=MISSING_GEOMETRIC)

        center = geometric.coordinates
        scores = self._score_candidates(candidates, filters)

        balanced_scores: list[float] = []
        for candidate, score in zip(candidates, scores):
            penalty = distance_km(center, score.location) * FAIRNESS_PENALTY_PER_KM
            balanced = score.total_score - penalty
            logger.debug(
                "candidate {} score={:.2f} penalty={:.2f} balanced={:.2f}",
                candidate.method_name,
                score.total_score,
                penalty,
                balanced,
            )
            balanced_scores.append(balanced)

        # max keeps the first index on ties, so input order decides
        best_index = max(range(len(candidates)), key=balanced_scores.__getitem__)
        winner = candidates[best_index]
        final_score = scores[best_index]
        method = winner.method_name
        if final_score.restaurant_count < min_restaurant_count:
            logger.info(
                "initial {}km search found only {} restaurants, expanding to {}km",
                BALANCED_RADIUS_M // 1000,
                final_score.restaurant_count,
                BALANCED_EXPANDED_RADIUS_M // 1000,
            )
            final_score = self.scorer.score(final_score.location, filters, BALANCED_EXPANDED_RADIUS_M)
            method = f"{method}{EXPANDED_SUFFIX}"

        return SelectionResult(best_score=final_score, best_method=method)
