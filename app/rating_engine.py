"""Deterministic surf rating for one spot, one forecast sample and one surfer.

Pipeline: safety gate -> fit scorer -> aggregator -> correction stages
(v1.4.1 false-positive, v1.4.2 false-negative) -> level classifier. Every step
is a pure function of its inputs and the RatingConfig; nothing is cached or
persisted, so callers may batch or memoize freely.
"""

from __future__ import annotations

from typing import Sequence

from app.aggregator import aggregate
from app.corrections import DEFAULT_STAGES, PartialResult, Stage, run_stages
from app.domain import (
    ForecastSample,
    LevelFitStatus,
    OverallStatus,
    RatingResult,
    SafetyFinding,
    SimpleCondition,
    SpotProfile,
    SurfLevel,
    UserContext,
    WaveStatus,
    WindStatus,
)
from app.errors import IncompleteForecastError
from app.fit_scorer import effective_wind_speed, require_complete, score_fits
from app.level_classifier import classify_levels
from app.rating_config import DEFAULT_RATING_CONFIG, RatingConfig
from app.safety_gate import evaluate_safety
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="rating_engine")

BLOCKED_FALLBACK = "This spot is not surfable at your level right now"
WARNING_SUFFIX = " Take extra care."


def _recommendation_band(rating: float) -> str:
    if rating >= 9:
        return "Perfect surf conditions!"
    if rating >= 7:
        return "A great day to surf!"
    if rating >= 5:
        return "Decent conditions."
    if rating >= 3:
        return "Conditions are a bit disappointing."
    return "Better to rest today."


def build_recommendation(
    rating: float,
    user_level: SurfLevel,
    level_status: LevelFitStatus,
    findings: Sequence[SafetyFinding],
) -> str:
    """One-line advice for the caller's own level.

    A blocked level gets its blocking reasons joined; otherwise a score-banded
    sentence, with a caution appended when the level is on WARNING.
    """
    if level_status == LevelFitStatus.BLOCKED:
        reasons = [f.reason for f in findings if f.severity_for(user_level) is not None]
        return "; ".join(reasons) if reasons else BLOCKED_FALLBACK

    message = _recommendation_band(rating)
    if level_status == LevelFitStatus.WARNING:
        message += WARNING_SUFFIX
    return message


def calculate_surf_rating(
    spot: SpotProfile,
    sample: ForecastSample,
    user: UserContext,
    config: RatingConfig = DEFAULT_RATING_CONFIG,
    stages: Sequence[Stage] = DEFAULT_STAGES,
) -> RatingResult:
    """Rate a forecast sample at a spot for a surfer.

    Raises
    ------
    IncompleteForecastError
        If wave height, wave period or wind speed is missing.
    """
    try:
        require_complete(sample)
    except IncompleteForecastError as exc:
        logger.warning("Rejecting incomplete forecast sample: %s", exc.missing_fields)
        raise

    findings = evaluate_safety(spot, sample, config)
    detail = score_fits(spot, sample, config, period_level=user.surf_level)
    raw = aggregate(detail, config.weights)

    partial = run_stages(
        PartialResult(detail=detail, raw_rating=raw, rating=raw, findings=tuple(findings)),
        config,
        stages,
    )
    rating = round(partial.rating, 1)
    level_fit = classify_levels(rating, partial.findings, config)
    logger.debug(
        "Rated sample: raw=%.2f final=%.1f stages=%s level_fit=%s",
        raw, rating, partial.applied, {k.value: v.value for k, v in level_fit.items()},
    )

    return RatingResult(
        surf_rating=rating,
        detail=detail,
        safety_reasons=[f.reason for f in partial.findings],
        level_fit=level_fit,
        user_level=user.surf_level,
        recommendation=build_recommendation(rating, user.surf_level, level_fit[user.surf_level], partial.findings),
        findings=list(partial.findings),
    )


def summarize_conditions(sample: ForecastSample, config: RatingConfig = DEFAULT_RATING_CONFIG) -> SimpleCondition:
    """Coarse labels for a dashboard card, independent of spot and level."""
    require_complete(sample)
    height = sample.wave_height
    wind = effective_wind_speed(sample.wind_speed, sample.wind_gusts, config)

    if height < 0.5:
        wave_status = WaveStatus.CALM
    elif height <= 1.5:
        wave_status = WaveStatus.MODERATE
    elif height <= 2.5:
        wave_status = WaveStatus.HIGH
    else:
        wave_status = WaveStatus.DANGEROUS

    if wind < 10:
        wind_status = WindStatus.LIGHT
    elif wind <= 20:
        wind_status = WindStatus.MODERATE
    elif wind <= 30:
        wind_status = WindStatus.STRONG
    else:
        wind_status = WindStatus.VERY_STRONG

    if 0.5 <= height <= 1.5 and wind < 20:
        overall = OverallStatus.GOOD
    elif height > 2.5 or wind > 30:
        overall = OverallStatus.CAUTION
    else:
        overall = OverallStatus.FAIR
    return SimpleCondition(wave_status=wave_status, wind_status=wind_status, overall=overall)
