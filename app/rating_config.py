"""Tunable constants for the rating engine, gathered in one immutable object.

Every weight, window and threshold the pipeline reads lives on RatingConfig so
alternative tunings can be passed to ``calculate_surf_rating`` without touching
module globals. Use ``DEFAULT_RATING_CONFIG.model_copy(update={...})`` to derive
a variant.
"""

from __future__ import annotations

from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.domain import BreakType, SurfLevel

Curve = Tuple[Tuple[float, float], ...]


class _ConfigModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class WaveWindow(_ConfigModel):
    """Optimal and tolerable wave-height bands in metres."""
    optimal_min: float
    optimal_max: float
    tolerable_min: float
    tolerable_max: float

    @model_validator(mode="after")
    def check_order(self) -> "WaveWindow":
        if not (self.tolerable_min <= self.optimal_min <= self.optimal_max <= self.tolerable_max):
            raise ValueError("wave window must satisfy tolerable_min <= optimal_min <= optimal_max <= tolerable_max")
        return self


def _window(opt_lo: float, opt_hi: float, tol_lo: float, tol_hi: float) -> WaveWindow:
    return WaveWindow(optimal_min=opt_lo, optimal_max=opt_hi, tolerable_min=tol_lo, tolerable_max=tol_hi)


class FitWeights(_ConfigModel):
    """Aggregation weights; wave and period dominate, swell matters least."""
    wave: float = 0.30
    period: float = 0.24
    wind_speed: float = 0.16
    wind_dir: float = 0.16
    swell: float = 0.14

    @model_validator(mode="after")
    def check_sum(self) -> "FitWeights":
        total = self.wave + self.period + self.wind_speed + self.wind_dir + self.swell
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"fit weights must sum to 1.0, got {total:.4f}")
        return self


DEFAULT_WAVE_TEMPLATES: Dict[BreakType, Dict[SurfLevel, WaveWindow]] = {
    BreakType.BEACH: {
        SurfLevel.BEGINNER: _window(0.5, 1.0, 0.3, 1.2),
        SurfLevel.INTERMEDIATE: _window(0.8, 1.5, 0.5, 2.0),
        SurfLevel.ADVANCED: _window(1.0, 2.0, 0.5, 2.5),
        SurfLevel.EXPERT: _window(1.5, 2.5, 0.8, 3.5),
    },
    BreakType.REEF: {
        SurfLevel.BEGINNER: _window(0.5, 0.8, 0.3, 1.0),
        SurfLevel.INTERMEDIATE: _window(1.0, 2.0, 0.8, 2.5),
        SurfLevel.ADVANCED: _window(1.5, 2.5, 1.0, 3.5),
        SurfLevel.EXPERT: _window(2.0, 3.5, 1.5, 5.0),
    },
    BreakType.POINT: {
        SurfLevel.BEGINNER: _window(0.5, 0.8, 0.3, 1.0),
        SurfLevel.INTERMEDIATE: _window(1.0, 1.8, 0.8, 2.5),
        SurfLevel.ADVANCED: _window(1.5, 2.5, 1.0, 3.5),
        SurfLevel.EXPERT: _window(2.0, 3.5, 1.5, 5.0),
    },
}

_PERIOD_CURVE: Curve = ((4, 0), (5, 1), (6, 3), (7, 5), (8, 7), (10, 8), (12, 9), (14, 10))

DEFAULT_PERIOD_CURVES: Dict[SurfLevel, Curve] = {
    # beginners get full marks earlier; long-period sets add power they don't need
    SurfLevel.BEGINNER: ((4, 0), (5, 1), (6, 3), (7, 5), (8, 7), (10, 8.5), (12, 10)),
    SurfLevel.INTERMEDIATE: _PERIOD_CURVE,
    SurfLevel.ADVANCED: _PERIOD_CURVE,
    SurfLevel.EXPERT: _PERIOD_CURVE,
}


class RatingConfig(_ConfigModel):
    """All engine tuning in one frozen object."""

    weights: FitWeights = Field(default_factory=FitWeights)
    neutral_fit: float = 5.0

    # wave fit
    wave_templates: Dict[BreakType, Dict[SurfLevel, WaveWindow]] = Field(
        default_factory=lambda: dict(DEFAULT_WAVE_TEMPLATES)
    )
    wave_grace_floor: float = 1.5
    wave_grace_band_m: float = 0.05

    # period fit
    period_curves: Dict[SurfLevel, Curve] = Field(default_factory=lambda: dict(DEFAULT_PERIOD_CURVES))

    # wind
    gust_excess_weight: float = 0.3
    gust_floor_ratio: float = 0.7
    wind_speed_curve: Curve = ((0, 10), (5, 10), (10, 8), (15, 6), (20, 4), (25, 2), (35, 0.5), (45, 0))
    wind_dir_curve: Curve = ((0, 10), (30, 10), (60, 8), (90, 5), (120, 3), (150, 1), (180, 1))
    weak_wind_neutral_kmh: float = 5.0
    weak_wind_full_kmh: float = 8.0

    # swell
    swell_spread_deg: Dict[BreakType, float] = Field(
        default_factory=lambda: {BreakType.BEACH: 45.0, BreakType.REEF: 30.0, BreakType.POINT: 25.0}
    )

    # safety gate
    beginner_wave_block_m: float = 1.2
    beginner_wave_grace_m: float = 0.2
    intermediate_wave_warn_m: float = 2.5
    intermediate_wave_block_m: float = 3.5
    advanced_wave_warn_m: float = 5.0
    wind_ceiling_kmh: float = 35.0
    gust_ceiling_kmh: float = 45.0
    onshore_offset_deg: float = 120.0
    onshore_wind_kmh: float = 25.0
    reef_low_tide_m: float = 0.3
    cold_water_c: float = 10.0

    # false-positive corrections
    mediocre_fit: float = 5.0
    compound_per_factor: float = 0.4
    compound_shortfall_weight: float = 0.1
    compound_max_penalty: float = 3.0
    compound_advisory_count: int = 3
    good_fit: float = 7.0
    quality_min_good: int = 3
    quality_cap: float = 6.0
    wave_gate_floor: float = 0.15
    wave_gate_full_fit: float = 4.0

    # false-negative corrections
    grace_other_floor: float = 5.0
    grace_other_mean: float = 7.0
    penalty_reversal_fraction: float = 0.5

    # level classification
    comfort_thresholds: Dict[SurfLevel, float] = Field(
        default_factory=lambda: {
            SurfLevel.BEGINNER: 3.0,
            SurfLevel.INTERMEDIATE: 2.5,
            SurfLevel.ADVANCED: 2.0,
            SurfLevel.EXPERT: 2.0,
        }
    )

    @field_validator("penalty_reversal_fraction")
    @classmethod
    def check_reversal(cls, v: float) -> float:
        """The grace zone may soften the compound penalty but never erase it."""
        if not 0.0 <= v < 1.0:
            raise ValueError("penalty_reversal_fraction must be in [0, 1)")
        return v

    @field_validator("wind_speed_curve", "wind_dir_curve")
    @classmethod
    def check_curve(cls, v: Curve) -> Curve:
        xs = [x for x, _ in v]
        if not xs or xs != sorted(xs):
            raise ValueError("curve knots must be non-empty and ascending")
        return v

    def wave_window(self, break_type: BreakType, level: SurfLevel) -> WaveWindow:
        by_level = self.wave_templates.get(break_type) or self.wave_templates[BreakType.BEACH]
        return by_level.get(level) or by_level[SurfLevel.INTERMEDIATE]


DEFAULT_RATING_CONFIG = RatingConfig()
