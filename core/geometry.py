"""Great-circle helpers on a spherical Earth."""
import math

from core.errors import InvalidSpeedError

EARTH_RADIUS_KM = 6371.0

_MS_PER_HOUR = 3_600_000


def bearing(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Compute the initial forward azimuth (0–360°, clockwise from north) from
    point 1 to point 2.
    """
    lat1_r = math.radians(lat1)
    lat2_r = math.radians(lat2)
    dlng_r = math.radians(lng2 - lng1)

    x = math.sin(dlng_r) * math.cos(lat2_r)
    y = (math.cos(lat1_r) * math.sin(lat2_r)
         - math.sin(lat1_r) * math.cos(lat2_r) * math.cos(dlng_r))

    return (math.degrees(math.atan2(x, y)) + 360) % 360


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres (haversine formula)."""
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (math.sin(dlat / 2) ** 2
         + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
         * math.sin(dlng / 2) ** 2)

    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def check_speed(speed_kmh: float) -> float:
    """Return `speed_kmh` as a float, or raise InvalidSpeedError."""
    try:
        speed = float(speed_kmh)
    except (TypeError, ValueError):
        raise InvalidSpeedError(f"Speed must be a number, got {speed_kmh!r}") from None
    if not math.isfinite(speed) or speed <= 0:
        raise InvalidSpeedError(f"Speed must be positive and finite, got {speed_kmh!r}")
    return speed


def segment_duration_ms(
    lat1: float, lng1: float, lat2: float, lng2: float, speed_kmh: float
) -> float:
    """Estimated time (ms) to cover the segment at a constant `speed_kmh`."""
    speed = check_speed(speed_kmh)
    return haversine_km(lat1, lng1, lat2, lng2) / speed * _MS_PER_HOUR
