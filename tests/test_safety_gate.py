import pytest

from app.domain import LEVEL_ORDER, BreakType, ForecastSample, Severity, SpotProfile, SurfLevel, TideStatus
from app.safety_gate import (
    BEGINNER_WAVE_GRACE_REASON,
    REEF_POINT_REASON,
    STRONG_WIND_REASON,
    evaluate_safety,
)


def spot(**overrides):
    base = {"difficulty_baseline": SurfLevel.INTERMEDIATE, "break_type": BreakType.BEACH, "coast_facing_deg": 270}
    base.update(overrides)
    return SpotProfile(**base)


def sample(**overrides):
    base = {"wave_height": 1.0, "wave_period": 10, "wind_speed": 10, "wind_gusts": 12, "wind_direction": 90}
    base.update(overrides)
    return ForecastSample(**base)


def codes(findings):
    return [f.code for f in findings]


def test_clean_beach_day_has_no_findings():
    assert evaluate_safety(spot(), sample()) == []


def test_reef_blocks_beginners_only():
    findings = evaluate_safety(spot(break_type=BreakType.REEF), sample())
    assert codes(findings) == ["REEF_POINT_BEGINNER"]
    assert findings[0].reason == REEF_POINT_REASON
    assert findings[0].severities == {SurfLevel.BEGINNER: Severity.BLOCK}


def test_point_break_also_blocks_beginners():
    findings = evaluate_safety(spot(break_type=BreakType.POINT), sample())
    assert codes(findings) == ["REEF_POINT_BEGINNER"]


def test_all_matching_rules_fire_in_order():
    findings = evaluate_safety(
        spot(break_type=BreakType.REEF),
        sample(wave_height=3.0, tide_status=TideStatus.LOW),
    )
    assert codes(findings) == [
        "BEGINNER_WAVE_CEILING",
        "INTERMEDIATE_WAVE_WARNING",
        "REEF_POINT_BEGINNER",
        "REEF_LOW_TIDE",
    ]


def test_wind_ceiling_is_universal():
    findings = evaluate_safety(spot(), sample(wind_speed=40, wind_gusts=None))
    assert codes(findings) == ["WIND_CEILING"]
    finding = findings[0]
    assert finding.universal
    assert finding.reason == STRONG_WIND_REASON
    assert all(finding.severity_for(level) == Severity.BLOCK for level in LEVEL_ORDER)


def test_wind_ceiling_counts_gusts():
    # effective wind max(20 + 0.3 * 35, 0.7 * 55) = 38.5
    assert codes(evaluate_safety(spot(), sample(wind_speed=20, wind_gusts=55))) == ["WIND_CEILING"]


def test_gust_peak_over_ceiling_blocks_even_when_effective_wind_is_moderate():
    # effective wind max(15 + 0.3 * 35, 0.7 * 50) = 35, not over the sustained ceiling
    findings = evaluate_safety(spot(), sample(wind_speed=15, wind_gusts=50))
    assert codes(findings) == ["WIND_CEILING"]
    assert findings[0].universal
    assert all(findings[0].severity_for(level) == Severity.BLOCK for level in LEVEL_ORDER)


def test_gust_exactly_at_gust_ceiling_does_not_block():
    assert evaluate_safety(spot(), sample(wind_speed=10, wind_gusts=45)) == []


def test_wind_exactly_at_ceiling_does_not_block():
    assert evaluate_safety(spot(), sample(wind_speed=35, wind_gusts=None)) == []


@pytest.mark.parametrize("height", [1.3, 1.39])
def test_beginner_ceiling_is_grace_eligible_on_beach_within_margin(height):
    finding = evaluate_safety(spot(), sample(wave_height=height))[0]
    assert finding.code == "BEGINNER_WAVE_CEILING"
    assert finding.grace_eligible
    assert finding.grace_reason == BEGINNER_WAVE_GRACE_REASON
    assert not finding.downgraded


def test_beginner_ceiling_beyond_margin_is_not_graceable():
    finding = evaluate_safety(spot(), sample(wave_height=1.45))[0]
    assert not finding.grace_eligible


def test_beginner_ceiling_on_reef_is_not_graceable():
    findings = evaluate_safety(spot(break_type=BreakType.REEF), sample(wave_height=1.3))
    assert not findings[0].grace_eligible


def test_intermediate_ceiling_warns_then_blocks():
    warn = evaluate_safety(spot(), sample(wave_height=2.6))
    assert codes(warn) == ["BEGINNER_WAVE_CEILING", "INTERMEDIATE_WAVE_WARNING"]
    assert warn[1].severity_for(SurfLevel.INTERMEDIATE) == Severity.WARN

    block = evaluate_safety(spot(), sample(wave_height=3.6))
    assert codes(block) == ["BEGINNER_WAVE_CEILING", "INTERMEDIATE_WAVE_CEILING"]
    assert block[1].severity_for(SurfLevel.INTERMEDIATE) == Severity.BLOCK


def test_advanced_warning_for_giant_surf():
    findings = evaluate_safety(spot(difficulty_baseline=SurfLevel.EXPERT), sample(wave_height=5.5))
    advanced = [f for f in findings if f.code == "ADVANCED_WAVE_WARNING"]
    assert advanced and advanced[0].severity_for(SurfLevel.ADVANCED) == Severity.WARN
    assert all(f.severity_for(SurfLevel.EXPERT) is None for f in findings)


def test_spot_difficulty_rules():
    advanced = evaluate_safety(spot(difficulty_baseline=SurfLevel.ADVANCED), sample())
    assert codes(advanced) == ["ADVANCED_SPOT"]
    assert advanced[0].severities == {SurfLevel.BEGINNER: Severity.BLOCK}

    expert = evaluate_safety(spot(difficulty_baseline=SurfLevel.EXPERT), sample())
    assert codes(expert) == ["EXPERT_SPOT"]
    assert expert[0].severity_for(SurfLevel.INTERMEDIATE) == Severity.BLOCK
    assert expert[0].severity_for(SurfLevel.ADVANCED) is None


def test_strong_onshore_wind():
    # coast faces west; wind from the west blows straight onto the beach
    findings = evaluate_safety(spot(), sample(wind_direction=270, wind_speed=30, wind_gusts=None))
    assert codes(findings) == ["STRONG_ONSHORE"]
    assert findings[0].severity_for(SurfLevel.BEGINNER) == Severity.BLOCK
    assert findings[0].severity_for(SurfLevel.INTERMEDIATE) == Severity.WARN


def test_moderate_onshore_or_strong_offshore_is_not_flagged():
    assert evaluate_safety(spot(), sample(wind_direction=270, wind_speed=20, wind_gusts=None)) == []
    assert evaluate_safety(spot(), sample(wind_direction=90, wind_speed=30, wind_gusts=None)) == []


def test_onshore_rule_needs_coast_orientation():
    assert evaluate_safety(spot(coast_facing_deg=None), sample(wind_direction=270, wind_speed=30)) == []


def test_shallow_reef_tide():
    findings = evaluate_safety(spot(break_type=BreakType.REEF), sample(tide_height=0.2))
    tide = [f for f in findings if f.code == "REEF_LOW_TIDE"][0]
    assert tide.severity_for(SurfLevel.BEGINNER) == Severity.BLOCK
    for level in (SurfLevel.INTERMEDIATE, SurfLevel.ADVANCED, SurfLevel.EXPERT):
        assert tide.severity_for(level) == Severity.WARN


def test_low_tide_on_beach_is_fine():
    assert evaluate_safety(spot(), sample(tide_status=TideStatus.LOW, tide_height=0.1)) == []


def test_cold_water():
    findings = evaluate_safety(spot(), sample(water_temperature=8))
    assert codes(findings) == ["COLD_WATER"]
    assert findings[0].severity_for(SurfLevel.BEGINNER) == Severity.BLOCK
    assert findings[0].severity_for(SurfLevel.INTERMEDIATE) == Severity.WARN
    assert evaluate_safety(spot(), sample(water_temperature=12)) == []
