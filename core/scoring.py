"""Side classification: which side of the vehicle the sun is on."""
import math
from typing import Literal

from core.solar import HORIZON_THRESHOLD

Side = Literal["left", "right", "none"]

# Map colours for each classification (green right, red left, blue night).
SIDE_COLORS: dict[str, str] = {
    "right": "#baffc9",
    "left": "#ffb3ba",
    "none": "#4444aa",
}

# Percentage-point lead one side needs before we recommend the other.
_SUGGESTION_MARGIN = 5


def relative_angle(sun_azimuth: float, heading: float) -> float:
    """
    Angle of the sun relative to the direction of travel, in (-180, 180].

    Positive values put the sun to the right of the vehicle, negative (and
    zero, dead ahead) to the left.
    """
    angle = (sun_azimuth - heading) % 360
    if angle > 180:
        angle -= 360
    return angle


def classify_side(
    sun_azimuth: float,
    sun_altitude: float,
    heading: float,
) -> Side:
    """
    Given solar azimuth/altitude and vehicle heading (degrees, 0=North,
    clockwise), return the side of the vehicle the sun shines on.

    "none" when the sun is at or below the horizon threshold.
    """
    if sun_altitude <= HORIZON_THRESHOLD:
        return "none"
    if relative_angle(sun_azimuth, heading) > 0:
        return "right"
    return "left"


def sun_percentages(left_sun_ms: float, right_sun_ms: float) -> tuple[int, int]:
    """Split of sunlit time between left and right, in whole percent.

    Both are 0 when neither side sees any sun.
    """
    total = left_sun_ms + right_sun_ms
    if total <= 0:
        return 0, 0
    # Halves round up.
    left = math.floor(100 * left_sun_ms / total + 0.5)
    return left, 100 - left


def seat_suggestion(
    left_percent: int,
    right_percent: int,
    in_darkness: bool = False,
) -> str:
    """Human-readable advice on which side to sit to avoid the sun."""
    if in_darkness:
        return "Route entirely in darkness."
    if left_percent == 0 and right_percent == 0:
        return "Route too short to compare sides."
    if left_percent > right_percent + _SUGGESTION_MARGIN:
        return "Sit on the right side to avoid sun."
    if right_percent > left_percent + _SUGGESTION_MARGIN:
        return "Sit on the left side to avoid sun."
    return "Both sides get similar sun exposure."
