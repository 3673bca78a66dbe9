"""Weighted combination of the five fit scores into a raw rating."""

from __future__ import annotations

from app.domain import FitDetail
from app.geometry import clamp_score
from app.rating_config import FitWeights


def aggregate(detail: FitDetail, weights: FitWeights) -> float:
    """Return the weighted sum of fits, clamped to [0, 10] and unrounded."""
    total = (
        detail.wave_fit * weights.wave
        + detail.period_fit * weights.period
        + detail.wind_speed_fit * weights.wind_speed
        + detail.wind_dir_fit * weights.wind_dir
        + detail.swell_fit * weights.swell
    )
    return clamp_score(total)
