"""Five independent 0-10 fit scores computed from physical measurements.

Each function is total over its domain: missing optional measurements score the
neutral mid-value, out-of-window readings clamp to 0, and every result is
rounded to one decimal.
"""

from __future__ import annotations

from app.domain import FitDetail, ForecastSample, SpotProfile, SurfLevel, SwellWindow, BreakType
from app.errors import IncompleteForecastError
from app.geometry import angular_diff, clamp_score, interpolate, wind_from_to_to
from app.rating_config import DEFAULT_RATING_CONFIG, RatingConfig, WaveWindow

REQUIRED_FIELDS = ("wave_height", "wave_period", "wind_speed")


def _finish(score: float) -> float:
    return round(clamp_score(score), 1)


def require_complete(sample: ForecastSample) -> None:
    """Raise IncompleteForecastError if a mandatory measurement is missing."""
    missing = [name for name in REQUIRED_FIELDS if getattr(sample, name) is None]
    if missing:
        raise IncompleteForecastError(missing)


def effective_wind_speed(
    wind_speed: float | None,
    wind_gusts: float | None,
    config: RatingConfig = DEFAULT_RATING_CONFIG,
) -> float:
    """Sustained wind adjusted for gustiness, in km/h.

    A gusty 15 km/h day rides rougher than a steady one, so a share of the gust
    excess is added on top, with a floor at a fixed fraction of the gust peak.
    """
    speed = wind_speed or 0.0
    gust = speed if wind_gusts is None else max(wind_gusts, 0.0)
    blended = speed + config.gust_excess_weight * max(0.0, gust - speed)
    return max(blended, config.gust_floor_ratio * gust)


def resolve_wave_window(spot: SpotProfile, level: SurfLevel, config: RatingConfig = DEFAULT_RATING_CONFIG) -> WaveWindow:
    """Template window for the break type and level, with per-spot bound overrides applied."""
    template = config.wave_window(spot.break_type, level)
    overrides = {
        "optimal_min": spot.optimal_wave_min,
        "optimal_max": spot.optimal_wave_max,
        "tolerable_min": spot.tolerable_wave_min,
        "tolerable_max": spot.tolerable_wave_max,
    }
    values = template.model_dump()
    values.update({k: v for k, v in overrides.items() if v is not None})
    if values == template.model_dump():
        return template
    # a partial override may leave the bounds out of order; score it as-is
    return WaveWindow.model_construct(**values)


def wave_fit(
    wave_height: float,
    level: SurfLevel,
    spot: SpotProfile,
    config: RatingConfig = DEFAULT_RATING_CONFIG,
) -> float:
    """Score wave height against the level's window for this spot.

    Peaks at the centre of the optimal band and falls linearly to 0 at a
    distance of half the tolerable band. Just past that edge a small floor
    ramps out over a narrow margin, so a reading a few centimetres outside the
    window does not score as a flat day.
    """
    window = resolve_wave_window(spot, level, config)
    center = (window.optimal_min + window.optimal_max) / 2
    half_range = (window.tolerable_max - window.tolerable_min) / 2
    if half_range <= 0:
        return 0.0

    distance = abs(wave_height - center)
    linear = 10.0 * (1.0 - distance / half_range)

    band = config.wave_grace_band_m
    tail = 0.0
    if band > 0 and distance < half_range + band:
        tail = config.wave_grace_floor * min(1.0, (half_range + band - distance) / band)
    return _finish(max(linear, tail))


def period_fit(wave_period: float, level: SurfLevel, config: RatingConfig = DEFAULT_RATING_CONFIG) -> float:
    """Longer periods mean cleaner ground swell; below 5 s is wind chop."""
    curve = config.period_curves.get(level) or config.period_curves[SurfLevel.INTERMEDIATE]
    return _finish(interpolate(curve, wave_period))


def swell_fit(
    swell_direction: float | None,
    window: SwellWindow | None,
    break_type: BreakType = BreakType.BEACH,
    config: RatingConfig = DEFAULT_RATING_CONFIG,
) -> float:
    """Score the swell bearing against the spot's preferred swell window."""
    if swell_direction is None or window is None:
        return config.neutral_fit
    spread = window.spread_deg or config.swell_spread_deg.get(break_type, 45.0)
    delta = angular_diff(swell_direction, window.direction)
    return _finish(10.0 * (1.0 - delta / spread))


def wind_speed_fit(effective_wind: float, config: RatingConfig = DEFAULT_RATING_CONFIG) -> float:
    """Glassy below 5 km/h, sliding to 0 by 45 km/h."""
    return _finish(interpolate(config.wind_speed_curve, max(0.0, effective_wind)))


def wind_dir_fit(
    wind_direction_deg: float | None,
    coast_facing_deg: float | None,
    effective_wind: float | None = None,
    config: RatingConfig = DEFAULT_RATING_CONFIG,
) -> float:
    """Score wind direction relative to the coast normal.

    The FROM bearing is converted to TO before comparing: a wind blowing
    toward the sea (offset near 0) is offshore and best, one blowing toward
    land (offset near 180) is onshore and worst. In light air direction barely
    matters, so the score is pulled to neutral at or below
    ``weak_wind_neutral_kmh`` and blended back in up to ``weak_wind_full_kmh``.
    """
    if wind_direction_deg is None or coast_facing_deg is None:
        return config.neutral_fit

    offset = angular_diff(wind_from_to_to(wind_direction_deg), coast_facing_deg)
    raw = interpolate(config.wind_dir_curve, offset)

    if effective_wind is not None:
        low, high = config.weak_wind_neutral_kmh, config.weak_wind_full_kmh
        if effective_wind <= low:
            return config.neutral_fit
        if effective_wind < high:
            share = (effective_wind - low) / (high - low)
            raw = config.neutral_fit + (raw - config.neutral_fit) * share
    return _finish(raw)


def onshore_offset(wind_direction_deg: float | None, coast_facing_deg: float | None) -> float | None:
    """Angle between the wind's TO bearing and the coast normal, or None if unknown."""
    if wind_direction_deg is None or coast_facing_deg is None:
        return None
    return angular_diff(wind_from_to_to(wind_direction_deg), coast_facing_deg)


def score_fits(
    spot: SpotProfile,
    sample: ForecastSample,
    config: RatingConfig = DEFAULT_RATING_CONFIG,
    period_level: SurfLevel | None = None,
) -> FitDetail:
    """Compute all five fits for a complete sample.

    Wave fit is judged against the spot's own difficulty window; period fit
    uses ``period_level`` (the caller's level) when given.
    """
    require_complete(sample)
    eff_wind = effective_wind_speed(sample.wind_speed, sample.wind_gusts, config)
    return FitDetail(
        wave_fit=wave_fit(sample.wave_height, spot.difficulty_baseline, spot, config),
        period_fit=period_fit(sample.wave_period, period_level or spot.difficulty_baseline, config),
        swell_fit=swell_fit(sample.swell_direction, spot.swell_window, spot.break_type, config),
        wind_speed_fit=wind_speed_fit(eff_wind, config),
        wind_dir_fit=wind_dir_fit(sample.wind_direction, spot.coast_facing_deg, eff_wind, config),
    )
