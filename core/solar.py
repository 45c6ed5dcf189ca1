"""Solar position: a low-precision ephemeris for route analysis, plus a pvlib reference."""
import math
from datetime import datetime, timezone

import pandas as pd
import pvlib

# Altitude (degrees) at which the sun's upper limb touches the horizon,
# refraction and the solar disk radius included.
HORIZON_THRESHOLD = -0.833

_J1970 = 2440588.0
_J2000 = 2451545.0
_OBLIQUITY = math.radians(23.4397)
_PERIHELION = 102.9372


def _days_since_j2000(timestamp_utc: float) -> float:
    return timestamp_utc / 86400.0 - 0.5 + _J1970 - _J2000


def _sun_coords(d: float) -> tuple[float, float]:
    """Declination and right ascension (radians) for `d` days past J2000."""
    m = math.radians(357.5291 + 0.98560028 * d)
    center = math.radians(
        1.9148 * math.sin(m) + 0.02 * math.sin(2 * m) + 0.0003 * math.sin(3 * m)
    )
    ecliptic_lng = m + center + math.radians(_PERIHELION) + math.pi

    dec = math.asin(math.sin(_OBLIQUITY) * math.sin(ecliptic_lng))
    ra = math.atan2(
        math.sin(ecliptic_lng) * math.cos(_OBLIQUITY), math.cos(ecliptic_lng)
    )
    return dec, ra


def get_sun_position(lat: float, lng: float, timestamp_utc: float) -> dict:
    """
    Return solar azimuth and altitude for a given location and UTC timestamp.

    Uses the standard low-precision solar ephemeris (mean anomaly, equation
    of centre, constant obliquity). Accurate to well under a tenth of a
    degree for present-day dates, which is plenty to tell which side of a
    vehicle the sun is on.

    Args:
        lat: Latitude in decimal degrees.
        lng: Longitude in decimal degrees (east positive).
        timestamp_utc: Unix timestamp (seconds since epoch, UTC).

    Returns:
        dict with keys:
            azimuth  – degrees clockwise from north, in [0, 360)
            altitude – degrees above the horizon (negative when below)
    """
    d = _days_since_j2000(timestamp_utc)
    dec, ra = _sun_coords(d)

    phi = math.radians(lat)
    sidereal = math.radians(280.16 + 360.9856235 * d + lng)
    hour_angle = sidereal - ra

    # atan2 here measures from south, westward positive.
    az_south = math.atan2(
        math.sin(hour_angle),
        math.cos(hour_angle) * math.sin(phi) - math.tan(dec) * math.cos(phi),
    )
    altitude = math.asin(
        math.sin(phi) * math.sin(dec)
        + math.cos(phi) * math.cos(dec) * math.cos(hour_angle)
    )

    return {
        "azimuth": (math.degrees(az_south) + 180.0) % 360.0,
        "altitude": math.degrees(altitude),
    }


def get_solar_position(lat: float, lon: float, dt: datetime) -> dict:
    """Return the NREL SPA solar position from pvlib for a location and time.

    Naive datetimes are treated as UTC. `altitude` is geometric,
    `apparent_altitude` includes atmospheric refraction.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    times = pd.DatetimeIndex([pd.Timestamp(dt)])
    location = pvlib.location.Location(latitude=lat, longitude=lon)
    solar_pos = location.get_solarposition(times)
    return {
        "azimuth": round(float(solar_pos["azimuth"].iloc[0]), 4),
        "altitude": round(float(solar_pos["elevation"].iloc[0]), 4),
        "apparent_altitude": round(float(solar_pos["apparent_elevation"].iloc[0]), 4),
    }
