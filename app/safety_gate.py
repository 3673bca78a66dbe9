"""Hard safety rules evaluated before any scoring.

Rules run in a fixed order and do not short-circuit: every matching rule
contributes its findings, and that order becomes message priority for the hint
synthesizer. A finding lists the levels it affects with a BLOCK or WARN
severity; universal findings affect every level.

Only the beginner wave ceiling on a beach break is grace-eligible. Whether the
grace actually applies depends on the fit scores, so the decision is deferred to
the false-negative correction stage.
"""

from __future__ import annotations

from typing import Callable, List, NamedTuple, Sequence, Tuple

from app.domain import (
    LEVEL_ORDER,
    BreakType,
    FitFactor,
    ForecastSample,
    SafetyFinding,
    Severity,
    SpotProfile,
    SurfLevel,
    TideStatus,
)
from app.fit_scorer import effective_wind_speed, onshore_offset
from app.rating_config import DEFAULT_RATING_CONFIG, RatingConfig
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="safety_gate")

BEGINNER_WAVE_REASON = "Waves are too big for beginners"
BEGINNER_WAVE_GRACE_REASON = "Waves are slightly above beginner range; surf only with an experienced companion"
BIG_WAVE_REASON = "Waves are big, take extra care"
HEAVY_WAVE_REASON = "Waves are too heavy for intermediate surfers"
GIANT_WAVE_REASON = "Very large surf, experts only"
STRONG_WIND_REASON = "Wind is too strong to surf safely"
REEF_POINT_REASON = "Reef or point break, not suitable for beginners"
ADVANCED_SPOT_REASON = "This spot is for advanced surfers"
EXPERT_SPOT_REASON = "This spot is for expert surfers only"
ONSHORE_REASON = "Strong onshore wind is pushing hard toward the beach"
LOW_TIDE_REASON = "Shallow reef at low tide"
COLD_WATER_REASON = "Water is cold enough to risk hypothermia"


class SafetyContext(NamedTuple):
    """Values shared by every rule, computed once per evaluation."""
    spot: SpotProfile
    sample: ForecastSample
    effective_wind: float
    onshore_offset: float | None
    config: RatingConfig


SafetyRule = Callable[[SafetyContext], Sequence[SafetyFinding]]


def _all_levels(severity: Severity):
    return {level: severity for level in LEVEL_ORDER}


def wave_ceiling_rule(ctx: SafetyContext) -> List[SafetyFinding]:
    """Per-level wave height ceilings."""
    cfg = ctx.config
    height = ctx.sample.wave_height
    findings: List[SafetyFinding] = []
    if height is None:
        return findings

    if height > cfg.beginner_wave_block_m:
        graceable = (
            ctx.spot.break_type == BreakType.BEACH
            and height <= cfg.beginner_wave_block_m + cfg.beginner_wave_grace_m
        )
        findings.append(SafetyFinding(
            code="BEGINNER_WAVE_CEILING",
            reason=BEGINNER_WAVE_REASON,
            severities={SurfLevel.BEGINNER: Severity.BLOCK},
            factor=FitFactor.WAVE,
            grace_eligible=graceable,
            grace_reason=BEGINNER_WAVE_GRACE_REASON if graceable else None,
        ))

    if height > cfg.intermediate_wave_block_m:
        findings.append(SafetyFinding(
            code="INTERMEDIATE_WAVE_CEILING",
            reason=HEAVY_WAVE_REASON,
            severities={SurfLevel.INTERMEDIATE: Severity.BLOCK},
            factor=FitFactor.WAVE,
        ))
    elif height > cfg.intermediate_wave_warn_m:
        findings.append(SafetyFinding(
            code="INTERMEDIATE_WAVE_WARNING",
            reason=BIG_WAVE_REASON,
            severities={SurfLevel.INTERMEDIATE: Severity.WARN},
            factor=FitFactor.WAVE,
        ))

    if height > cfg.advanced_wave_warn_m:
        findings.append(SafetyFinding(
            code="ADVANCED_WAVE_WARNING",
            reason=GIANT_WAVE_REASON,
            severities={SurfLevel.ADVANCED: Severity.WARN},
            factor=FitFactor.WAVE,
        ))
    return findings


def wind_ceiling_rule(ctx: SafetyContext) -> List[SafetyFinding]:
    """Universal ceiling on gust-adjusted wind or on the raw gust peak; blocks every level."""
    cfg = ctx.config
    gust = ctx.sample.wind_gusts
    gust_breach = gust is not None and gust > cfg.gust_ceiling_kmh
    if ctx.effective_wind <= cfg.wind_ceiling_kmh and not gust_breach:
        return []
    return [SafetyFinding(
        code="WIND_CEILING",
        reason=STRONG_WIND_REASON,
        severities=_all_levels(Severity.BLOCK),
        factor=FitFactor.WIND_SPEED,
        universal=True,
    )]


def break_type_rule(ctx: SafetyContext) -> List[SafetyFinding]:
    if ctx.spot.break_type not in (BreakType.REEF, BreakType.POINT):
        return []
    return [SafetyFinding(
        code="REEF_POINT_BEGINNER",
        reason=REEF_POINT_REASON,
        severities={SurfLevel.BEGINNER: Severity.BLOCK},
    )]


def spot_difficulty_rule(ctx: SafetyContext) -> List[SafetyFinding]:
    baseline = ctx.spot.difficulty_baseline
    if baseline == SurfLevel.EXPERT:
        return [SafetyFinding(
            code="EXPERT_SPOT",
            reason=EXPERT_SPOT_REASON,
            severities={SurfLevel.BEGINNER: Severity.BLOCK, SurfLevel.INTERMEDIATE: Severity.BLOCK},
        )]
    if baseline == SurfLevel.ADVANCED:
        return [SafetyFinding(
            code="ADVANCED_SPOT",
            reason=ADVANCED_SPOT_REASON,
            severities={SurfLevel.BEGINNER: Severity.BLOCK},
        )]
    return []


def strong_onshore_rule(ctx: SafetyContext) -> List[SafetyFinding]:
    """Strong wind blowing toward land: blocks beginners, warns intermediates."""
    cfg = ctx.config
    if ctx.onshore_offset is None:
        return []
    if ctx.onshore_offset < cfg.onshore_offset_deg or ctx.effective_wind < cfg.onshore_wind_kmh:
        return []
    return [SafetyFinding(
        code="STRONG_ONSHORE",
        reason=ONSHORE_REASON,
        severities={SurfLevel.BEGINNER: Severity.BLOCK, SurfLevel.INTERMEDIATE: Severity.WARN},
        factor=FitFactor.WIND_DIR,
    )]


def hazardous_tide_rule(ctx: SafetyContext) -> List[SafetyFinding]:
    """Shallow water over reef: warns everyone, blocks beginners."""
    if ctx.spot.break_type != BreakType.REEF:
        return []
    sample = ctx.sample
    shallow = sample.tide_status == TideStatus.LOW or (
        sample.tide_height is not None and sample.tide_height < ctx.config.reef_low_tide_m
    )
    if not shallow:
        return []
    severities = _all_levels(Severity.WARN)
    severities[SurfLevel.BEGINNER] = Severity.BLOCK
    return [SafetyFinding(code="REEF_LOW_TIDE", reason=LOW_TIDE_REASON, severities=severities)]


def cold_water_rule(ctx: SafetyContext) -> List[SafetyFinding]:
    temp = ctx.sample.water_temperature
    if temp is None or temp >= ctx.config.cold_water_c:
        return []
    return [SafetyFinding(
        code="COLD_WATER",
        reason=COLD_WATER_REASON,
        severities={SurfLevel.BEGINNER: Severity.BLOCK, SurfLevel.INTERMEDIATE: Severity.WARN},
    )]


DEFAULT_SAFETY_RULES: Tuple[SafetyRule, ...] = (
    wave_ceiling_rule,
    wind_ceiling_rule,
    break_type_rule,
    spot_difficulty_rule,
    strong_onshore_rule,
    hazardous_tide_rule,
    cold_water_rule,
)


def evaluate_safety(
    spot: SpotProfile,
    sample: ForecastSample,
    config: RatingConfig = DEFAULT_RATING_CONFIG,
    rules: Sequence[SafetyRule] = DEFAULT_SAFETY_RULES,
) -> List[SafetyFinding]:
    """Run every rule in order and collect all findings."""
    ctx = SafetyContext(
        spot=spot,
        sample=sample,
        effective_wind=effective_wind_speed(sample.wind_speed, sample.wind_gusts, config),
        onshore_offset=onshore_offset(sample.wind_direction, spot.coast_facing_deg),
        config=config,
    )
    findings: List[SafetyFinding] = []
    for rule in rules:
        findings.extend(rule(ctx))
    if findings:
        logger.debug("Safety gate matched %s", [f.code for f in findings])
    return findings
