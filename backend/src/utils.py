"""Utility helpers for the dining midpoint service."""

from __future__ import annotations

import math
from typing import Any, Iterable, List, Optional, Sequence, Union


def mask_secret(value: Optional[str], visible: int = 4) -> str:
    if not value:
        return "unset"
    if len(value) <= visible * 2:
        return "*" * len(value)
    return f"{value[:visible]}...{value[-visible:]}"


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometers."""
    R = 6371.0
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return R * c


def normalize_filters(filters: Optional[Iterable[Union[str, Sequence[Any]]]]) -> List[str]:
    """Flatten filter input into an ordered, deduplicated token list.

    Accepts plain tokens or token groups (lists/tuples); a group is joined by a
    single space into one token. Blank tokens are dropped.
    """
    out: list[str] = []
    if not filters:
        return out
    for item in filters:
        if item is None:
            continue
        if isinstance(item, str):
            token = item.strip()
        else:
            token = " ".join(str(part).strip() for part in item if part is not None and str(part).strip())
        if token and token not in out:
            out.append(token)
    return out
