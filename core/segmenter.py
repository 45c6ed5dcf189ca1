"""Sun-exposure segmentation: walk a route and tally time-in-sun per side."""
import logging
import math
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any, Optional

from core.config import DEFAULT_SPEED_KMH
from core.errors import InvalidRouteError, InvalidTimeError
from core.geometry import bearing, check_speed, segment_duration_ms
from core.scoring import SIDE_COLORS, classify_side, seat_suggestion, sun_percentages
from core.solar import get_sun_position

_log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Input normalisation
# ---------------------------------------------------------------------------

def _coerce_point(point: Any, index: int) -> tuple[float, float]:
    """Accept (lat, lng) pairs or {lat, lng|lon} mappings."""
    try:
        if isinstance(point, Mapping):
            lat = point["lat"]
            lng = point["lng"] if "lng" in point else point["lon"]
        else:
            if isinstance(point, (str, bytes)):
                raise TypeError(point)
            lat, lng = point
        lat, lng = float(lat), float(lng)
    except (KeyError, TypeError, ValueError):
        raise InvalidRouteError(f"Point {index} is not a coordinate: {point!r}") from None

    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidRouteError(f"Point {index} has a non-finite coordinate: {point!r}")
    if abs(lat) > 90 or abs(lng) > 180:
        raise InvalidRouteError(f"Point {index} is out of range: ({lat}, {lng})")
    return lat, lng


def normalize_route(route: Optional[Sequence]) -> list[tuple[float, float]]:
    """
    Validate a route and return it as a list of (lat, lng) tuples.

    Raises:
        InvalidRouteError: fewer than two points, or a malformed point.
    """
    if route is None or isinstance(route, (str, bytes)):
        raise InvalidRouteError("Route must be a sequence of coordinates")
    points = [_coerce_point(p, i) for i, p in enumerate(route)]
    if len(points) < 2:
        raise InvalidRouteError(
            f"Route needs at least 2 points to analyse, got {len(points)}"
        )
    return points


def coerce_start_time(start_time: Any) -> float:
    """
    Turn a start instant into a Unix timestamp (seconds, UTC).

    Accepts datetimes (naive → assumed UTC), Unix timestamps in seconds and
    ISO 8601 strings.

    Raises:
        InvalidTimeError: the value cannot be read as an instant.
    """
    if isinstance(start_time, str):
        text = start_time.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            start_time = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidTimeError(f"Unparseable start time: {start_time!r}") from None

    if isinstance(start_time, datetime):
        if start_time.tzinfo is None:
            start_time = start_time.replace(tzinfo=timezone.utc)
        return start_time.timestamp()

    if isinstance(start_time, (int, float)) and not isinstance(start_time, bool):
        ts = float(start_time)
        if not math.isfinite(ts):
            raise InvalidTimeError(f"Start time is not finite: {start_time!r}")
        try:
            datetime.fromtimestamp(ts, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise InvalidTimeError(f"Start time out of range: {start_time!r}") from None
        return ts

    raise InvalidTimeError(f"Unsupported start time: {start_time!r}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def segment_route(
    route: Sequence,
    start_time: Any,
    speed_kmh: float = DEFAULT_SPEED_KMH,
) -> dict:
    """
    Classify every segment of a route by the side the sun is on.

    Travel time is estimated at a constant `speed_kmh`. The sun is sampled
    at each segment's start point, at the moment the vehicle reaches it.

    Args:
        route:      Ordered coordinates, at least two. Each is a (lat, lng)
                    pair or a mapping with lat and lng (or lon) keys.
        start_time: Departure instant: datetime (naive → UTC), Unix
                    timestamp in seconds, or ISO 8601 string.
        speed_kmh:  Assumed average speed.

    Returns:
        {
            "segments": [
                {
                    "index":           int,    # index of the segment's first point
                    "start":           (lat, lng),
                    "end":             (lat, lng),
                    "side":            "left" | "right" | "none",
                    "color":           str,    # hex colour for drawing
                    "duration_ms":     float,
                    "timestamp_utc":   float,  # when the segment is entered
                    "heading_degrees": float,
                    "sun_azimuth":     float,
                    "sun_altitude":    float,
                },
                ...
            ],
            "left_sun_ms":    float,
            "right_sun_ms":   float,
            "no_sun_ms":      float,
            "total_ms":       float,
            "left_percent":   int,
            "right_percent":  int,
            "in_darkness":    bool,   # every segment has the sun below the horizon
            "suggestion":     str,
            "start_time_utc": float,
            "end_time_utc":   float,
        }

    Raises:
        InvalidRouteError: fewer than two points or a malformed coordinate.
        InvalidTimeError:  start_time is not a usable instant.
        InvalidSpeedError: speed_kmh is not positive and finite.
    """
    points = normalize_route(route)
    start_ts = coerce_start_time(start_time)
    speed = check_speed(speed_kmh)

    segments: list[dict] = []
    elapsed_ms = 0.0
    tally = {"left": 0.0, "right": 0.0, "none": 0.0}

    for i in range(len(points) - 1):
        lat1, lng1 = points[i]
        lat2, lng2 = points[i + 1]

        duration = segment_duration_ms(lat1, lng1, lat2, lng2, speed)
        entered_at = start_ts + elapsed_ms / 1000.0
        sun = get_sun_position(lat1, lng1, entered_at)
        elapsed_ms += duration

        heading = bearing(lat1, lng1, lat2, lng2)
        side = classify_side(sun["azimuth"], sun["altitude"], heading)
        tally[side] += duration

        segments.append({
            "index": i,
            "start": (lat1, lng1),
            "end": (lat2, lng2),
            "side": side,
            "color": SIDE_COLORS[side],
            "duration_ms": duration,
            "timestamp_utc": entered_at,
            "heading_degrees": heading,
            "sun_azimuth": sun["azimuth"],
            "sun_altitude": sun["altitude"],
        })

    left_percent, right_percent = sun_percentages(tally["left"], tally["right"])
    in_darkness = all(seg["side"] == "none" for seg in segments)

    _log.debug(
        "Segmented %d points: left=%.0fms right=%.0fms dark=%.0fms",
        len(points), tally["left"], tally["right"], tally["none"],
    )

    return {
        "segments": segments,
        "left_sun_ms": tally["left"],
        "right_sun_ms": tally["right"],
        "no_sun_ms": tally["none"],
        "total_ms": elapsed_ms,
        "left_percent": left_percent,
        "right_percent": right_percent,
        "in_darkness": in_darkness,
        "suggestion": seat_suggestion(left_percent, right_percent, in_darkness),
        "start_time_utc": start_ts,
        "end_time_utc": start_ts + elapsed_ms / 1000.0,
    }
