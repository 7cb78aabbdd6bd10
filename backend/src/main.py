from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Literal, Optional, Union

import requests
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel, Field, field_validator

from config import Configuration
from models import Coordinate, Err
from services.dining_categories import category_param
from services.foursquare import FoursquareClient
from services.locator import find_best_dining_location, location_payload


load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    cfg = Configuration.from_env()
    if cfg.has_foursquare:
        logger.info("Foursquare credentials are configured")
    else:
        logger.error("Foursquare client id or secret is not set in environment variables")
    logger.info("cfg: {}", cfg.log_summary())
    app.state.places_client = FoursquareClient(cfg)
    yield


app = FastAPI(title="Group Dining Midpoint", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _places_client(cfg: Configuration) -> FoursquareClient:
    """Process-wide client so the search cache outlives a single request."""
    client = getattr(app.state, "places_client", None)
    if client is None:
        client = FoursquareClient(cfg)
        app.state.places_client = client
    return client


class MidpointOptions(BaseModel):
    minAcceptableScore: Optional[int] = Field(None, ge=0, le=100)
    minRestaurantCount: Optional[int] = Field(None, ge=1)
    policy: Optional[Literal["balanced", "single"]] = None


class MidpointRequest(BaseModel):
    coordinates: List[List[float]] = Field(..., min_length=2, description="[latitude, longitude] per participant")
    filters: List[Union[str, List[str]]] = Field(default_factory=list)
    options: MidpointOptions = Field(default_factory=MidpointOptions)

    @field_validator("coordinates")
    @classmethod
    def _check_coordinates(cls, value: List[List[float]]) -> List[List[float]]:
        for pair in value:
            if len(pair) != 2:
                raise ValueError("Each coordinate must be a [latitude, longitude] pair")
            lat, lng = pair
            if not -90.0 <= lat <= 90.0:
                raise ValueError("Invalid latitude")
            if not -180.0 <= lng <= 180.0:
                raise ValueError("Invalid longitude")
        return value


class MidpointPayload(BaseModel):
    latitude: float
    longitude: float


class RestaurantPayload(BaseModel):
    rid: str
    name: str
    coordinates: List[float]
    address: Optional[str] = None
    images: List[str] = []
    categories: List[str] = []
    score: float
    distanceKm: float


class MidpointResponse(BaseModel):
    midpoint: MidpointPayload
    restaurants: List[RestaurantPayload]
    method: str
    score: float
    restaurantCount: int
    meetsMinScore: bool


@app.get("/healthz")
def healthz() -> dict:
    cfg = Configuration.from_env()
    logger.info("cfg: {}", cfg.log_summary())
    return {"status": "ok", "places_configured": cfg.has_foursquare}


@app.get("/health/places")
def health_places() -> dict:
    cfg = Configuration.from_env()
    try:
        cfg.require_foursquare()
        r = requests.get(
            f"{cfg.foursquare_base_url.rstrip('/')}{FoursquareClient.SEARCH_PATH}",
            params={
                "ll": "40.7580,-73.9855",
                "limit": 1,
                "categoryId": category_param(),
                "client_id": cfg.foursquare_client_id,
                "client_secret": cfg.foursquare_client_secret,
                "v": cfg.foursquare_api_version,
            },
            timeout=cfg.foursquare_timeout,
        )
        ok = r.ok
    except (ValueError, requests.RequestException):
        ok = False
    return {"ok": ok}


@app.post("/midpoint", response_model=MidpointResponse)
def calculate_midpoint(req: MidpointRequest) -> Dict[str, Any]:
    try:
        cfg = Configuration.from_env()
        cfg.require_foursquare()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    coordinates = [Coordinate(lat, lng) for lat, lng in req.coordinates]
    try:
        outcome = find_best_dining_location(
            cfg,
            coordinates,
            req.filters,
            min_acceptable_score=req.options.minAcceptableScore,
            min_restaurant_count=req.options.minRestaurantCount,
            policy=req.options.policy,
            client=_places_client(cfg),
        )
    except Exception as exc:
        logger.exception("midpoint calculation failed: {}", exc)
        raise HTTPException(status_code=500, detail="internal error")

    if isinstance(outcome, Err):
        raise HTTPException(status_code=422, detail=outcome.reason)

    payload = location_payload(outcome.value)
    logger.info(
        "midpoint method={} restaurants={} score={:.2f}",
        payload["method"],
        len(payload["restaurants"]),
        payload["score"],
    )
    return payload


@app.get("/places/{place_id}/images")
def place_images(place_id: str) -> dict:
    cfg = Configuration.from_env()
    client = _places_client(cfg)
    return {"id": place_id, "images": client.get_restaurant_images(place_id)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8010, reload=True)
