"""API route definitions."""
import logging
from datetime import datetime, timezone
from typing import Literal, Optional

import httpx
from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from core.config import DEFAULT_SPEED_KMH
from core.errors import GeocodingError, InvalidRouteError, RoutingError, SunRouteError
from core.geocoding import resolve_location, search_locations
from core.routing import get_route_coordinates
from core.scoring import classify_side, relative_angle
from core.segmenter import segment_route
from core.solar import get_solar_position, get_sun_position

router = APIRouter()

_log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------

class LatLng(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class ExposureRequest(BaseModel):
    coordinates: list[LatLng] = Field(..., description="Route points in travel order")
    start_time: Optional[datetime] = Field(
        None, description="ISO 8601 start time; naive timestamps assumed UTC; omitted = now"
    )
    speed_kmh: float = Field(DEFAULT_SPEED_KMH, gt=0, description="Assumed average speed")


class RouteExposureRequest(BaseModel):
    origin: str = Field(..., min_length=1, description="Origin address or 'lat,lng'")
    destination: str = Field(..., min_length=1, description="Destination address or 'lat,lng'")
    start_time: Optional[datetime] = Field(
        None, description="ISO 8601 start time; naive timestamps assumed UTC; omitted = now"
    )
    speed_kmh: float = Field(DEFAULT_SPEED_KMH, gt=0, description="Assumed average speed")


class SegmentOut(BaseModel):
    index: int
    start: LatLng
    end: LatLng
    side: Literal["left", "right", "none"]
    color: str
    duration_ms: float
    timestamp_utc: float
    heading_degrees: float
    sun_azimuth: float
    sun_altitude: float


class ExposureResponse(BaseModel):
    segments: list[SegmentOut]
    left_sun_ms: float
    right_sun_ms: float
    no_sun_ms: float
    total_ms: float
    left_percent: int
    right_percent: int
    in_darkness: bool
    suggestion: str
    start_time_utc: float
    end_time_utc: float


class Place(BaseModel):
    lat: float
    lng: float
    display_name: str


class RouteExposureResponse(ExposureResponse):
    origin: Place
    destination: Place


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _start_or_now(start_time: Optional[datetime]) -> datetime:
    if start_time is None:
        return datetime.now(timezone.utc)
    return start_time


def _run_segmenter(coordinates, start_time, speed_kmh) -> dict:
    """Run the segmenter, translating input errors into HTTP errors."""
    try:
        result = segment_route(coordinates, start_time, speed_kmh)
    except InvalidRouteError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except SunRouteError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    for seg in result["segments"]:
        seg["start"] = {"lat": seg["start"][0], "lng": seg["start"][1]}
        seg["end"] = {"lat": seg["end"][0], "lng": seg["end"][1]}
    return result


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/sun-position")
def sun_position(
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude"),
    dt: datetime = Query(default=None, description="ISO datetime (UTC); defaults to now"),
    precise: bool = Query(False, description="Use the pvlib SPA model instead of the fast ephemeris"),
):
    dt = _start_or_now(dt)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    if precise:
        return get_solar_position(lat, lon, dt)
    return get_sun_position(lat, lon, dt.timestamp())


@router.get("/sun-side")
def sun_side(
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude"),
    heading: float = Query(..., allow_inf_nan=False, description="Vehicle heading in degrees (0=North, clockwise)"),
    dt: datetime = Query(default=None, description="ISO datetime (UTC); defaults to now"),
):
    dt = _start_or_now(dt)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    sun = get_sun_position(lat, lon, dt.timestamp())
    return {
        **sun,
        "relative_angle": relative_angle(sun["azimuth"], heading),
        "side": classify_side(sun["azimuth"], sun["altitude"], heading),
    }


@router.get("/search", response_model=list[Place])
async def search(
    q: str = Query(..., min_length=3, description="Free-text place query"),
    limit: int = Query(5, ge=1, le=20),
):
    try:
        return await search_locations(q, limit=limit)
    except httpx.HTTPError as exc:
        _log.warning("Geocoding request failed: %s", exc)
        raise HTTPException(status_code=502, detail="Geocoding service unavailable")


# ---------------------------------------------------------------------------
# POST /exposure
# ---------------------------------------------------------------------------

@router.post("/exposure", response_model=ExposureResponse)
def exposure(body: ExposureRequest) -> ExposureResponse:
    """Segment a caller-supplied route by sun side."""
    coordinates = [(p.lat, p.lng) for p in body.coordinates]
    result = _run_segmenter(coordinates, _start_or_now(body.start_time), body.speed_kmh)
    return ExposureResponse(**result)


# ---------------------------------------------------------------------------
# POST /route-exposure
# ---------------------------------------------------------------------------

@router.post("/route-exposure", response_model=RouteExposureResponse)
async def route_exposure(body: RouteExposureRequest) -> RouteExposureResponse:
    """
    Full pipeline:
      1. Resolve origin and destination (geocoding or "lat,lng" literals)
      2. Fetch the driving route from OSRM
      3. Segment the route by sun side at the requested start time
    """
    start_time = _start_or_now(body.start_time)

    # --- Step 1: geocoding ---
    try:
        origin = await resolve_location(body.origin)
        destination = await resolve_location(body.destination)
    except GeocodingError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except httpx.HTTPError as exc:
        _log.warning("Geocoding request failed: %s", exc)
        raise HTTPException(status_code=502, detail="Geocoding service unavailable")

    # --- Step 2: routing ---
    try:
        coordinates = await get_route_coordinates(
            (origin["lat"], origin["lng"]),
            (destination["lat"], destination["lng"]),
        )
    except RoutingError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except httpx.HTTPStatusError as exc:
        raise HTTPException(
            status_code=502,
            detail=f"Routing service returned an unexpected HTTP error: {exc.response.status_code}",
        )
    except httpx.HTTPError as exc:
        _log.warning("Routing request failed: %s", exc)
        raise HTTPException(status_code=502, detail="Routing service unavailable")

    # --- Step 3: segmentation ---
    result = _run_segmenter(coordinates, start_time, body.speed_kmh)

    return RouteExposureResponse(
        **result,
        origin=Place(**origin),
        destination=Place(**destination),
    )
