"""Versioned correction passes applied after aggregation.

Corrections are an ordered list of pure stages, each taking and returning a
PartialResult. New tuning generations append stages instead of editing old
ones, and each stage can be exercised on its own.

v1.4.1 (false positives): a compound-risk penalty when several fits are
mediocre at once, and a quality gate that caps scores lacking enough strong
factors and scales down days with almost no usable wave.

v1.4.2 (false negatives): a grace zone confirming that a marginal,
grace-eligible breach is downgraded to a warning when the rest of the session
looks strong, handing back part of the compound penalty.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from statistics import mean
from typing import Callable, Sequence, Set, Tuple

from app.domain import FitDetail, FitFactor, SafetyFinding, Severity, SurfLevel
from app.geometry import clamp_score
from app.rating_config import RatingConfig
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="corrections")

COMPOUND_RISK_REASON = "Several conditions are marginal at once; beginners should take care"


@dataclass(frozen=True)
class PartialResult:
    """Working result threaded through the correction stages."""
    detail: FitDetail
    raw_rating: float
    rating: float
    findings: Tuple[SafetyFinding, ...] = ()
    compound_penalty: float = 0.0
    rating_ceiling: float = 10.0
    wave_gate_multiplier: float = 1.0
    applied: Tuple[str, ...] = field(default_factory=tuple)

    def with_stage(self, name: str, **changes) -> "PartialResult":
        return replace(self, applied=self.applied + (name,), **changes)


Stage = Callable[[PartialResult, RatingConfig], PartialResult]


def apply_compound_risk_penalty(partial: PartialResult, config: RatingConfig) -> PartialResult:
    """Penalise several mediocre factors landing together.

    The penalty grows with the number of fits at or below ``mediocre_fit`` and
    with how far below it they sit. Three or more also add a beginner advisory.
    """
    fits = partial.detail.by_factor().values()
    mediocre = [f for f in fits if f <= config.mediocre_fit]
    if len(mediocre) < 2:
        return partial.with_stage("compound_risk")

    shortfall = sum(config.mediocre_fit - f for f in mediocre)
    penalty = min(
        config.compound_max_penalty,
        config.compound_per_factor * (len(mediocre) - 1) + config.compound_shortfall_weight * shortfall,
    )
    findings = partial.findings
    if len(mediocre) >= config.compound_advisory_count:
        findings = findings + (SafetyFinding(
            code="COMPOUND_RISK",
            reason=COMPOUND_RISK_REASON,
            severities={SurfLevel.BEGINNER: Severity.WARN},
        ),)
    logger.debug("Compound risk: %d mediocre fits, penalty %.2f", len(mediocre), penalty)
    return partial.with_stage(
        "compound_risk",
        rating=clamp_score(partial.rating - penalty),
        compound_penalty=penalty,
        findings=findings,
    )


def apply_quality_gate(partial: PartialResult, config: RatingConfig) -> PartialResult:
    """Cap ratings without enough strong factors and scale down wave-starved days."""
    good = sum(1 for f in partial.detail.by_factor().values() if f > config.good_fit)
    rating = partial.rating
    ceiling = partial.rating_ceiling
    if good < config.quality_min_good:
        ceiling = min(ceiling, config.quality_cap)
        rating = min(rating, ceiling)

    floor = config.wave_gate_floor
    multiplier = min(1.0, floor + (1.0 - floor) * partial.detail.wave_fit / config.wave_gate_full_fit)
    rating *= multiplier
    return partial.with_stage(
        "quality_gate",
        rating=clamp_score(rating),
        rating_ceiling=ceiling,
        wave_gate_multiplier=multiplier,
    )


def _grace_breaches(partial: PartialResult, config: RatingConfig) -> Set[FitFactor]:
    """Factors breached by grace-eligible blocks, or an empty set when grace does not apply."""
    blocking = [f for f in partial.findings if f.blocks_any]
    if not blocking or not all(f.grace_eligible for f in blocking):
        return set()
    breached = {f.factor for f in blocking}
    others = [v for k, v in partial.detail.by_factor().items() if k not in breached]
    if not others:
        return set()
    if min(others) >= config.grace_other_floor and mean(others) >= config.grace_other_mean:
        return breached
    return set()


def _downgrade(finding: SafetyFinding) -> SafetyFinding:
    severities = {
        level: Severity.WARN if severity == Severity.BLOCK else severity
        for level, severity in finding.severities.items()
    }
    return finding.model_copy(update={
        "severities": severities,
        "downgraded": True,
        "reason": finding.grace_reason or finding.reason,
    })


def confirm_grace_zone(partial: PartialResult, config: RatingConfig) -> PartialResult:
    """Downgrade marginal blocks when every other factor is favourable.

    Applies only when all blocking findings are grace-eligible, no other fit is
    below ``grace_other_floor`` and their mean reaches ``grace_other_mean``.
    Part of the compound penalty is restored, never all of it. A downgraded
    wave breach means the waves are too big, so the wave gate (meant for
    wave-starved days) is lifted as well.
    """
    breached = _grace_breaches(partial, config)
    if not breached:
        return partial.with_stage("grace_zone")

    findings = tuple(_downgrade(f) if f.grace_eligible else f for f in partial.findings)
    base = partial.rating
    if FitFactor.WAVE in breached and partial.wave_gate_multiplier > 0:
        base = partial.rating / partial.wave_gate_multiplier
    restored = config.penalty_reversal_fraction * partial.compound_penalty
    rating = min(partial.rating_ceiling, base + restored)
    logger.info(
        "Grace zone confirmed for %s; restored %.2f of %.2f penalty",
        [f.code for f in findings if f.downgraded], restored, partial.compound_penalty,
    )
    return partial.with_stage("grace_zone", findings=findings, rating=clamp_score(max(rating, partial.rating)))


FALSE_POSITIVE_STAGES: Tuple[Stage, ...] = (apply_compound_risk_penalty, apply_quality_gate)
FALSE_NEGATIVE_STAGES: Tuple[Stage, ...] = (confirm_grace_zone,)
DEFAULT_STAGES: Tuple[Stage, ...] = FALSE_POSITIVE_STAGES + FALSE_NEGATIVE_STAGES


def run_stages(partial: PartialResult, config: RatingConfig, stages: Sequence[Stage] = DEFAULT_STAGES) -> PartialResult:
    for stage in stages:
        partial = stage(partial, config)
    return partial
