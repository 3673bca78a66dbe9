"""Domain vocabulary and strict schemas for surf condition ratings.

This module defines the stable contract between the rating engine and whatever
serves its results: enums, hint tags, and Pydantic models for the payloads that
flow through the pipeline. Field names are snake_case in Python and camelCase
on the wire (``surfRating``, ``detail.waveFit``). No scoring logic lives here.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.geometry import compass_to_degrees, normalize_degrees


class StrictBaseModel(BaseModel):
    """Base model with strict extra handling and camelCase wire names."""

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


class FrozenBaseModel(StrictBaseModel):
    """Immutable variant used for engine inputs and results."""

    model_config = ConfigDict(frozen=True)


class SurfLevel(str, Enum):
    """Surfer skill level, ordered from least to most experienced."""
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"


LEVEL_ORDER: Tuple[SurfLevel, ...] = (
    SurfLevel.BEGINNER,
    SurfLevel.INTERMEDIATE,
    SurfLevel.ADVANCED,
    SurfLevel.EXPERT,
)


class BreakType(str, Enum):
    """Sea-floor type the wave breaks over."""
    BEACH = "BEACH"
    REEF = "REEF"
    POINT = "POINT"


class BoardType(str, Enum):
    """Board the caller rides; UNSET for anonymous callers."""
    LONGBOARD = "LONGBOARD"
    MIDLENGTH = "MIDLENGTH"
    SHORTBOARD = "SHORTBOARD"
    UNSET = "UNSET"


class TideStatus(str, Enum):
    HIGH = "HIGH"
    LOW = "LOW"
    RISING = "RISING"
    FALLING = "FALLING"


class LevelFitStatus(str, Enum):
    """Per-level verdict, ordered PASS < WARNING < BLOCKED."""
    PASS = "PASS"
    WARNING = "WARNING"
    BLOCKED = "BLOCKED"


class Severity(str, Enum):
    """What a safety finding does to the level it applies to."""
    BLOCK = "BLOCK"
    WARN = "WARN"


class FitFactor(str, Enum):
    """The five independent fit scores."""
    WAVE = "wave"
    PERIOD = "period"
    SWELL = "swell"
    WIND_SPEED = "wind_speed"
    WIND_DIR = "wind_dir"


class HintTag(str, Enum):
    """Closed set of badges shown next to a rating."""
    SAFETY_WARNING = "SAFETY_WARNING"
    WAVE_TOO_SMALL = "WAVE_TOO_SMALL"
    WAVE_TOO_BIG = "WAVE_TOO_BIG"
    STRONG_WIND = "STRONG_WIND"
    ONSHORE_WIND = "ONSHORE_WIND"
    OFFSHORE_WIND = "OFFSHORE_WIND"
    GOOD_SWELL = "GOOD_SWELL"
    BAD_SWELL = "BAD_SWELL"
    SHORT_PERIOD = "SHORT_PERIOD"
    LONG_PERIOD = "LONG_PERIOD"
    LONGBOARD_TIP = "LONGBOARD_TIP"
    SHORTBOARD_TIP = "SHORTBOARD_TIP"
    GREAT_CONDITION = "GREAT_CONDITION"


class WaveStatus(str, Enum):
    CALM = "calm"
    MODERATE = "moderate"
    HIGH = "high"
    DANGEROUS = "dangerous"


class WindStatus(str, Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    STRONG = "strong"
    VERY_STRONG = "very_strong"


class OverallStatus(str, Enum):
    GOOD = "good"
    FAIR = "fair"
    CAUTION = "caution"


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class SwellWindow(FrozenBaseModel):
    """Swell direction a spot works best with, plus its tolerance in degrees.

    ``direction`` accepts degrees or a 16-point compass label ("SW", "NNE").
    ``spread_deg`` falls back to a break-type default when omitted.
    """
    direction: float
    spread_deg: float | None = Field(default=None, gt=0, le=180)

    @field_validator("direction", mode="before")
    @classmethod
    def parse_direction(cls, v):
        if isinstance(v, str):
            return compass_to_degrees(v)
        return v

    @field_validator("direction", mode="after")
    @classmethod
    def wrap_direction(cls, v: float) -> float:
        return normalize_degrees(v)


class SpotProfile(FrozenBaseModel):
    """Static attributes of a surf spot used by the engine."""
    difficulty_baseline: SurfLevel = SurfLevel.INTERMEDIATE
    break_type: BreakType = BreakType.BEACH
    coast_facing_deg: float | None = Field(default=None, ge=0, lt=360)
    optimal_wave_min: float | None = Field(default=None, ge=0)
    optimal_wave_max: float | None = Field(default=None, ge=0)
    tolerable_wave_min: float | None = Field(default=None, ge=0)
    tolerable_wave_max: float | None = Field(default=None, ge=0)
    swell_window: SwellWindow | None = None


def _finite_or_none(v: float | None) -> float | None:
    if v is None or not math.isfinite(v):
        return None
    return v


def _bounded(v: float | None, lower: float, upper: float) -> float | None:
    v = _finite_or_none(v)
    if v is None:
        return None
    return max(lower, min(upper, v))


class ForecastSample(FrozenBaseModel):
    """One already-fetched forecast hour for a spot.

    Heights are metres, periods seconds, speeds km/h and directions degrees.
    Wind direction is the direction the wind blows FROM. Noisy values are
    clamped to physical bounds and non-finite readings are treated as missing,
    so a malformed reading never propagates NaN into a score.
    """
    wave_height: float | None = None
    wave_period: float | None = None
    wave_direction: float | None = None
    wind_speed: float | None = None
    wind_gusts: float | None = None
    wind_direction: float | None = None
    swell_height: float | None = None
    swell_period: float | None = None
    swell_direction: float | None = None
    tide_height: float | None = None
    tide_status: TideStatus | None = None
    water_temperature: float | None = None

    @field_validator("wave_height", "swell_height", mode="after")
    @classmethod
    def clamp_height(cls, v: float | None) -> float | None:
        return _bounded(v, 0.0, 30.0)

    @field_validator("wave_period", "swell_period", mode="after")
    @classmethod
    def clamp_period(cls, v: float | None) -> float | None:
        return _bounded(v, 0.0, 30.0)

    @field_validator("wind_speed", "wind_gusts", mode="after")
    @classmethod
    def clamp_wind(cls, v: float | None) -> float | None:
        return _bounded(v, 0.0, 250.0)

    @field_validator("wave_direction", "wind_direction", "swell_direction", mode="after")
    @classmethod
    def wrap_direction(cls, v: float | None) -> float | None:
        v = _finite_or_none(v)
        return None if v is None else normalize_degrees(v)

    @field_validator("tide_height", "water_temperature", mode="after")
    @classmethod
    def drop_non_finite(cls, v: float | None) -> float | None:
        return _finite_or_none(v)


class UserContext(FrozenBaseModel):
    """Who is asking: skill level plus board (UNSET when anonymous)."""
    surf_level: SurfLevel
    board_type: BoardType = BoardType.UNSET


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class FitDetail(FrozenBaseModel):
    """The five independent fit scores, each in [0, 10]."""
    wave_fit: float = Field(ge=0, le=10)
    period_fit: float = Field(ge=0, le=10)
    swell_fit: float = Field(ge=0, le=10)
    wind_speed_fit: float = Field(ge=0, le=10)
    wind_dir_fit: float = Field(ge=0, le=10)

    def by_factor(self) -> Dict[FitFactor, float]:
        return {
            FitFactor.WAVE: self.wave_fit,
            FitFactor.PERIOD: self.period_fit,
            FitFactor.SWELL: self.swell_fit,
            FitFactor.WIND_SPEED: self.wind_speed_fit,
            FitFactor.WIND_DIR: self.wind_dir_fit,
        }


class SafetyFinding(FrozenBaseModel):
    """A single safety rule match.

    ``severities`` maps each affected level to BLOCK or WARN; a universal
    finding carries every level. ``factor`` names the fit score the breach is
    about, which lets the grace-zone check look at the *other* fits.
    """
    code: str
    reason: str
    severities: Dict[SurfLevel, Severity]
    factor: FitFactor | None = None
    universal: bool = False
    grace_eligible: bool = False
    grace_reason: str | None = None
    downgraded: bool = False

    def severity_for(self, level: SurfLevel) -> Severity | None:
        return self.severities.get(level)

    @property
    def blocks_any(self) -> bool:
        return Severity.BLOCK in self.severities.values()


class RatingResult(FrozenBaseModel):
    """Engine output for one (spot, sample, user) triple."""
    surf_rating: float = Field(ge=0, le=10)
    detail: FitDetail
    safety_reasons: List[str] = Field(default_factory=list)
    level_fit: Dict[SurfLevel, LevelFitStatus]
    user_level: SurfLevel
    recommendation: str = ""
    findings: List[SafetyFinding] = Field(default_factory=list, exclude=True)


class HintsResult(FrozenBaseModel):
    tags: List[HintTag] = Field(default_factory=list, max_length=3)
    message: str


class SimpleCondition(FrozenBaseModel):
    """Coarse wave/wind/overall labels for dashboard cards."""
    wave_status: WaveStatus
    wind_status: WindStatus
    overall: OverallStatus
