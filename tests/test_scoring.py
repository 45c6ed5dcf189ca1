"""Tests for side classification logic."""
import pytest

from core.scoring import (
    SIDE_COLORS,
    classify_side,
    relative_angle,
    seat_suggestion,
    sun_percentages,
)
from core.solar import HORIZON_THRESHOLD


@pytest.mark.parametrize("azimuth, heading, expected", [
    (90, 0, 90),
    (270, 0, -90),
    (0, 90, -90),
    (10, 350, 20),
    (350, 10, -20),
    (180, 0, 180),
    (0, 0, 0),
])
def test_relative_angle_wraps_into_half_open_range(azimuth, heading, expected):
    assert relative_angle(azimuth, heading) == pytest.approx(expected)


def test_sun_directly_to_right():
    # Vehicle heading north (0), sun at east (90) → sun on right
    assert classify_side(sun_azimuth=90, sun_altitude=30, heading=0) == "right"


def test_sun_directly_to_left():
    # Vehicle heading north (0), sun at west (270) → sun on left
    assert classify_side(sun_azimuth=270, sun_altitude=30, heading=0) == "left"


def test_sun_dead_ahead_counts_as_left():
    assert classify_side(sun_azimuth=45, sun_altitude=30, heading=45) == "left"


def test_sun_directly_behind_counts_as_right():
    assert classify_side(sun_azimuth=225, sun_altitude=30, heading=45) == "right"


def test_heading_rotates_relative_angle():
    # Sun is north (0°), vehicle heading east (90°) → sun on the left
    assert classify_side(sun_azimuth=0, sun_altitude=10, heading=90) == "left"


def test_sun_at_horizon_threshold_is_none():
    assert classify_side(90, HORIZON_THRESHOLD, 0) == "none"


def test_sun_just_above_threshold_is_classified():
    # Below the geometric horizon, but the upper limb is still visible.
    assert classify_side(90, -0.5, 0) == "right"


def test_sun_below_horizon_is_none():
    assert classify_side(90, -12.0, 0) == "none"


def test_every_side_has_a_color():
    assert set(SIDE_COLORS) == {"left", "right", "none"}


# ---------------------------------------------------------------------------
# Percentages and suggestions
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("left_ms, right_ms, expected", [
    (3000, 1000, (75, 25)),
    (1000, 2000, (33, 67)),
    (0, 5000, (0, 100)),
    (5000, 0, (100, 0)),
    (0, 0, (0, 0)),
    (1, 7, (13, 87)),
    (7, 1, (88, 12)),
    (1, 1, (50, 50)),
])
def test_sun_percentages(left_ms, right_ms, expected):
    assert sun_percentages(left_ms, right_ms) == expected


def test_percentages_sum_to_100_when_sunny():
    for left_ms, right_ms in [(1, 2), (7, 3), (123.4, 567.8), (1, 1)]:
        assert sum(sun_percentages(left_ms, right_ms)) == 100


def test_suggestion_sit_right_when_left_is_sunnier():
    assert "right" in seat_suggestion(80, 20)


def test_suggestion_sit_left_when_right_is_sunnier():
    assert "left" in seat_suggestion(20, 80)


def test_suggestion_similar_within_margin():
    assert seat_suggestion(52, 48) == "Both sides get similar sun exposure."


def test_suggestion_darkness():
    assert "darkness" in seat_suggestion(0, 0, in_darkness=True)


def test_suggestion_no_sun_time_without_darkness():
    assert seat_suggestion(0, 0) == "Route too short to compare sides."
