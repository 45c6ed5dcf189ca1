"""Routing: fetch a driving route from OSRM as an ordered list of coordinates."""
import logging
from typing import Optional

import httpx

from core import config
from core.errors import RoutingError

_log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _decode_polyline(encoded: str, precision: int = 5) -> list[tuple[float, float]]:
    """
    Decode an encoded polyline string into (lat, lng) pairs.

    Uses the standard 5-bit chunk algorithm documented at
    https://developers.google.com/maps/documentation/utilities/polylinealgorithm
    which OSRM also emits for `geometries=polyline`.
    """
    factor = 10 ** precision
    points: list[tuple[float, float]] = []
    index = 0
    lat = 0
    lng = 0
    n = len(encoded)

    while index < n:
        # Decode one coordinate (lat then lng)
        for is_lng in range(2):
            shift = 0
            result = 0
            while True:
                b = ord(encoded[index]) - 63
                index += 1
                result |= (b & 0x1F) << shift
                shift += 5
                if b < 0x20:        # highest bit clear → last chunk
                    break
            delta = ~(result >> 1) if (result & 1) else (result >> 1)
            if is_lng:
                lng += delta
            else:
                lat += delta

        points.append((lat / factor, lng / factor))

    return points


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def get_route_coordinates(
    start: tuple[float, float],
    end: tuple[float, float],
    base_url: Optional[str] = None,
) -> list[tuple[float, float]]:
    """
    Fetch a driving route between two points and return its full geometry.

    Args:
        start:    (lat, lng) of the start point.
        end:      (lat, lng) of the destination.
        base_url: OSRM server root. Falls back to SUNROUTE_OSRM_URL.

    Returns:
        Ordered list of (lat, lng) tuples, start to destination.

    Raises:
        RoutingError: If OSRM reports an error code or finds no route.
        httpx.HTTPStatusError: On HTTP-level errors.
    """
    base = (base_url or config.OSRM_URL).rstrip("/")
    # OSRM wants lng,lat order.
    waypoints = f"{start[1]},{start[0]};{end[1]},{end[0]}"
    url = f"{base}/route/v1/driving/{waypoints}"
    params = {"overview": "full", "geometries": "polyline"}

    async with httpx.AsyncClient(timeout=config.HTTP_TIMEOUT) as client:
        response = await client.get(url, params=params)
        response.raise_for_status()
        data = response.json()

    code = data.get("code")
    if code != "Ok":
        raise RoutingError(
            f"Routing service error: {code}: {data.get('message', 'no details')}"
        )

    routes = data.get("routes") or []
    if not routes:
        _log.warning("OSRM returned no routes for %s → %s", start, end)
        raise RoutingError("No route found between the selected locations")

    points = _decode_polyline(routes[0]["geometry"])
    _log.debug("Route of %d points, %.0f m", len(points), routes[0].get("distance", 0.0))
    return points
