"""Per-level PASS/WARNING/BLOCKED verdicts from findings and the final rating."""

from __future__ import annotations

from typing import Dict, Sequence

from app.domain import LEVEL_ORDER, LevelFitStatus, SafetyFinding, Severity, SurfLevel
from app.rating_config import DEFAULT_RATING_CONFIG, RatingConfig


def classify_level(
    level: SurfLevel,
    rating: float,
    findings: Sequence[SafetyFinding],
    config: RatingConfig = DEFAULT_RATING_CONFIG,
) -> LevelFitStatus:
    """Verdict for one level.

    BLOCKED when a finding still blocks this level; WARNING when a finding warns
    it (including grace-downgraded blocks) or the rating is under the level's
    comfort threshold; PASS otherwise.
    """
    applicable = [f for f in findings if f.severity_for(level) is not None]
    if any(f.severity_for(level) == Severity.BLOCK and not f.downgraded for f in applicable):
        return LevelFitStatus.BLOCKED
    if applicable:
        return LevelFitStatus.WARNING
    if rating < config.comfort_thresholds.get(level, 0.0):
        return LevelFitStatus.WARNING
    return LevelFitStatus.PASS


def classify_levels(
    rating: float,
    findings: Sequence[SafetyFinding],
    config: RatingConfig = DEFAULT_RATING_CONFIG,
) -> Dict[SurfLevel, LevelFitStatus]:
    return {level: classify_level(level, rating, findings, config) for level in LEVEL_ORDER}
