from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import BaseModel, Field

from utils import mask_secret


class Configuration(BaseModel):
    # Foursquare
    foursquare_client_id: Optional[str] = Field(default=None)
    foursquare_client_secret: Optional[str] = Field(default=None)
    foursquare_base_url: str = Field(default="https://api.foursquare.com")
    foursquare_api_version: str = Field(default="20251029")
    foursquare_timeout: int = Field(default=10)
    foursquare_page_size: int = Field(default=50)
    places_cache_ttl: int = Field(default=60 * 30)

    # Selection
    selection_policy: str = Field(default="balanced")
    min_restaurant_count: int = Field(default=5)
    midpoint_methods: list[str] = Field(default_factory=lambda: ["geometric", "median"])
    scoring_max_workers: int = Field(default=4)

    @classmethod
    def from_env(cls, overrides: Optional[dict[str, Any]] = None) -> "Configuration":
        raw: dict[str, Any] = {}

        env_map = {
            "foursquare_client_id": os.getenv("FOURSQUARE_CLIENT_ID"),
            "foursquare_client_secret": os.getenv("FOURSQUARE_CLIENT_SECRET"),
            "foursquare_base_url": os.getenv("FOURSQUARE_BASE_URL"),
            "foursquare_api_version": os.getenv("FOURSQUARE_API_VERSION"),
            "foursquare_timeout": os.getenv("FOURSQUARE_TIMEOUT"),
            "foursquare_page_size": os.getenv("FOURSQUARE_PAGE_SIZE"),
            "places_cache_ttl": os.getenv("PLACES_CACHE_TTL"),
            "selection_policy": os.getenv("SELECTION_POLICY"),
            "min_restaurant_count": os.getenv("MIN_RESTAURANT_COUNT"),
            "midpoint_methods": os.getenv("MIDPOINT_METHODS"),
            "scoring_max_workers": os.getenv("SCORING_MAX_WORKERS"),
        }

        list_fields = {"midpoint_methods"}

        for k, v in env_map.items():
            if v is None:
                continue
            if k in list_fields:
                raw[k] = [item.strip() for item in str(v).split(",") if item.strip()]
            else:
                raw[k] = v

        if overrides:
            raw.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**raw)

    @property
    def has_foursquare(self) -> bool:
        return bool(self.foursquare_client_id and self.foursquare_client_secret)

    @property
    def page_size(self) -> int:
        # the venues endpoint caps a single page at 50
        return max(1, min(self.foursquare_page_size, 50))

    def require_foursquare(self) -> None:
        if not self.has_foursquare:
            raise ValueError("FOURSQUARE_CLIENT_ID and FOURSQUARE_CLIENT_SECRET are required")

    def log_summary(self) -> str:
        return (
            "foursquare=%s base=%s version=%s timeout=%s page_size=%s policy=%s client_id=%s client_secret=%s"
            % (
                self.has_foursquare,
                self.foursquare_base_url,
                self.foursquare_api_version,
                self.foursquare_timeout,
                self.page_size,
                self.selection_policy,
                mask_secret(self.foursquare_client_id),
                mask_secret(self.foursquare_client_secret),
            )
        )
