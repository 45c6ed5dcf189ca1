"""Geocoding: free-text place search against Nominatim."""
import logging
import re
from typing import Optional

import httpx

from core import config
from core.errors import GeocodingError

_log = logging.getLogger(__name__)

_LATLNG_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*,\s*(-?\d+(?:\.\d+)?)\s*$")


def parse_latlng(text: str) -> Optional[tuple[float, float]]:
    """Return (lat, lng) if `text` is a literal "lat,lng" pair, else None."""
    match = _LATLNG_RE.match(text)
    if not match:
        return None
    lat, lng = float(match.group(1)), float(match.group(2))
    if abs(lat) > 90 or abs(lng) > 180:
        return None
    return lat, lng


async def search_locations(
    query: str,
    limit: int = 5,
    base_url: Optional[str] = None,
) -> list[dict]:
    """
    Search for places matching `query`.

    Returns a list of dicts with keys `lat`, `lng` and `display_name`.
    Results without coordinates are dropped; a blank query returns [].

    Raises:
        httpx.HTTPStatusError: On HTTP-level errors.
    """
    if not query.strip():
        return []

    base = (base_url or config.NOMINATIM_URL).rstrip("/")
    params = {
        "q": query,
        "format": "json",
        "limit": limit,
        "addressdetails": 1,
    }
    headers = {"User-Agent": config.USER_AGENT}

    async with httpx.AsyncClient(timeout=config.SEARCH_TIMEOUT) as client:
        response = await client.get(f"{base}/search", params=params, headers=headers)
        response.raise_for_status()
        data = response.json()

    results = []
    for item in data:
        if not item.get("lat") or not item.get("lon"):
            continue
        results.append({
            "lat": float(item["lat"]),
            "lng": float(item["lon"]),
            "display_name": item.get("display_name", ""),
        })
    return results


async def resolve_location(text: str) -> dict:
    """
    Resolve free text (or a "lat,lng" literal) to a single location.

    Raises:
        GeocodingError: If the text is blank or nothing matches.
    """
    literal = parse_latlng(text)
    if literal is not None:
        return {"lat": literal[0], "lng": literal[1], "display_name": text.strip()}

    if not text.strip():
        raise GeocodingError("Empty location")

    matches = await search_locations(text, limit=1)
    if not matches:
        _log.warning("No geocoding match for %r", text)
        raise GeocodingError(f"Location not found: {text}")
    return matches[0]
