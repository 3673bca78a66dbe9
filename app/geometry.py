"""Angle and score helpers shared by the fit scorer, safety gate and corrections.

Meteorological wind direction is the bearing the wind blows FROM. Every
comparison against a coast normal first converts it to the bearing the wind
blows TO; skipping that step flips offshore and onshore.
"""

from __future__ import annotations

from typing import Dict, Sequence, Tuple

# 16-point compass rose, truncated to whole degrees.
COMPASS_DEGREES: Dict[str, float] = {
    "N": 0, "NNE": 22, "NE": 45, "ENE": 67,
    "E": 90, "ESE": 112, "SE": 135, "SSE": 157,
    "S": 180, "SSW": 202, "SW": 225, "WSW": 247,
    "W": 270, "WNW": 292, "NW": 315, "NNW": 337,
}


def normalize_degrees(deg: float) -> float:
    """Wrap any bearing into [0, 360)."""
    wrapped = deg % 360.0
    # -1e-18 % 360 rounds to 360.0
    return 0.0 if wrapped >= 360.0 else wrapped


def angular_diff(a: float, b: float) -> float:
    """Smallest absolute difference between two bearings, in [0, 180]."""
    diff = abs(normalize_degrees(a) - normalize_degrees(b))
    return 360.0 - diff if diff > 180.0 else diff


def wind_from_to_to(from_deg: float) -> float:
    """Convert a FROM bearing into the bearing the air moves toward."""
    return normalize_degrees(from_deg + 180.0)


def compass_to_degrees(label: str) -> float:
    """Translate a compass label such as "SW" into degrees.

    Raises ValueError for labels outside the 16-point rose.
    """
    key = label.strip().upper()
    if key not in COMPASS_DEGREES:
        raise ValueError(f"Unknown compass direction: {label!r}")
    return float(COMPASS_DEGREES[key])


def interpolate(points: Sequence[Tuple[float, float]], x: float) -> float:
    """Piecewise-linear lookup over ascending (x, y) knots.

    Values outside the knot range take the nearest end value.
    """
    if x <= points[0][0]:
        return points[0][1]
    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        if x <= x1:
            if x1 == x0:
                return y1
            return y0 + (y1 - y0) * (x - x0) / (x1 - x0)
    return points[-1][1]


def clamp_score(score: float) -> float:
    """Clamp a score to the 0-10 range."""
    return max(0.0, min(10.0, score))
