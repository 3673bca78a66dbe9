"""Turn a rating into up to three badge tags and a short message.

The rating engine owns the numbers; this module only explains them. Rules are
evaluated in a fixed priority order, each adding at most one tag and one
message fragment:

1. safety          - any safety reason; first reason becomes the message
2. wave extremes   - too small / too big, only when the wave fit is low
3. wind            - strong wind, else offshore / onshore
4. swell           - good / bad swell direction
5. period          - long / short period
6. board tip       - longboard or shortboard advice; needs a board and no safety reason
7. great condition - high rating and no safety reason

Only the first three tags and first two fragments are kept. The great-condition
tag holds a reserved slot: when it fires it replaces the lowest-priority tag
rather than being cut off. Anonymous callers go through
``generate_public_hints``, which never gives board tips.
"""

from __future__ import annotations

from typing import Callable, List, NamedTuple, Optional, Tuple

from app.domain import BoardType, FitDetail, ForecastSample, FrozenBaseModel, HintTag, HintsResult, RatingResult
from app.fit_scorer import effective_wind_speed
from app.rating_config import DEFAULT_RATING_CONFIG, RatingConfig

MAX_TAGS = 3
MAX_FRAGMENTS = 2

NO_DATA_MESSAGE = "No forecast data available."
FALLBACK_GOOD_MESSAGE = "Decent conditions for a surf."
FALLBACK_POOR_MESSAGE = "Check the conditions before heading out."
GREAT_MESSAGE = "Great conditions today!"


class HintsInput(FrozenBaseModel):
    """Everything the hint rules look at.

    ``detail`` is None when the spot has no forecast sample. ``wind_speed`` is
    the gust-adjusted effective wind so hints agree with the wind fit.
    """
    detail: FitDetail | None = None
    surf_rating: float = 0.0
    safety_reasons: Tuple[str, ...] = ()
    board_type: BoardType = BoardType.UNSET
    wave_height: float | None = None
    wind_speed: float | None = None
    wave_period: float | None = None

    @classmethod
    def from_rating(
        cls,
        result: RatingResult,
        sample: ForecastSample,
        board_type: BoardType = BoardType.UNSET,
        config: RatingConfig = DEFAULT_RATING_CONFIG,
    ) -> "HintsInput":
        return cls(
            detail=result.detail,
            surf_rating=result.surf_rating,
            safety_reasons=tuple(result.safety_reasons),
            board_type=board_type,
            wave_height=sample.wave_height,
            wind_speed=effective_wind_speed(sample.wind_speed, sample.wind_gusts, config),
            wave_period=sample.wave_period,
        )

    @classmethod
    def no_data(cls, safety_reasons: Tuple[str, ...] = (), board_type: BoardType = BoardType.UNSET) -> "HintsInput":
        return cls(safety_reasons=tuple(safety_reasons), board_type=board_type)


class HintOutcome(NamedTuple):
    tag: Optional[HintTag] = None
    fragment: Optional[str] = None


class HintRule(NamedTuple):
    """A named rule.

    ``only_if_silent`` fragments are used only when nothing else spoke;
    ``reserved_slot`` tags are never truncated away.
    """
    name: str
    evaluate: Callable[[HintsInput], Optional[HintOutcome]]
    only_if_silent: bool = False
    reserved_slot: bool = False


def _sentence(text: str) -> str:
    return text if text.endswith((".", "!", "?")) else f"{text}."


def _safety(data: HintsInput) -> Optional[HintOutcome]:
    if data.safety_reasons:
        return HintOutcome(HintTag.SAFETY_WARNING, _sentence(data.safety_reasons[0]))
    return None


def _wave_extremes(data: HintsInput) -> Optional[HintOutcome]:
    if data.detail.wave_fit > 3 or data.wave_height is None:
        return None
    if data.wave_height < 0.3:
        return HintOutcome(HintTag.WAVE_TOO_SMALL, "Waves are too small.")
    if data.wave_height > 2.5:
        return HintOutcome(HintTag.WAVE_TOO_BIG, "Waves are very big, be careful.")
    return None


def _wind(data: HintsInput) -> Optional[HintOutcome]:
    detail = data.detail
    if detail.wind_speed_fit <= 4 and data.wind_speed is not None and data.wind_speed > 25:
        return HintOutcome(HintTag.STRONG_WIND, "Wind is strong.")
    if detail.wind_dir_fit >= 7:
        return HintOutcome(HintTag.OFFSHORE_WIND)
    if detail.wind_dir_fit <= 3:
        return HintOutcome(HintTag.ONSHORE_WIND)
    return None


def _swell(data: HintsInput) -> Optional[HintOutcome]:
    if data.detail.swell_fit >= 7:
        return HintOutcome(HintTag.GOOD_SWELL)
    if data.detail.swell_fit <= 3:
        return HintOutcome(HintTag.BAD_SWELL, "Swell direction doesn't suit this spot.")
    return None


def _period(data: HintsInput) -> Optional[HintOutcome]:
    if data.detail.period_fit >= 7:
        return HintOutcome(HintTag.LONG_PERIOD)
    if data.detail.period_fit <= 3 and data.wave_period is not None and data.wave_period < 6:
        return HintOutcome(HintTag.SHORT_PERIOD, "Short period, the waves will be weak and choppy.")
    return None


def _board_tip(data: HintsInput) -> Optional[HintOutcome]:
    if data.board_type == BoardType.UNSET or data.safety_reasons or data.wave_height is None:
        return None
    height = data.wave_height
    if data.board_type == BoardType.LONGBOARD:
        if height <= 1.0 and data.surf_rating >= 4:
            return HintOutcome(HintTag.LONGBOARD_TIP, "Gentle waves, perfect for a longboard!")
        if height > 2.0:
            return HintOutcome(HintTag.LONGBOARD_TIP, "Waves may be a bit big for a longboard.")
    elif data.board_type == BoardType.SHORTBOARD:
        if height < 0.5:
            return HintOutcome(HintTag.SHORTBOARD_TIP, "Waves are too small for a shortboard.")
        if height >= 1.5 and data.surf_rating >= 6:
            return HintOutcome(HintTag.SHORTBOARD_TIP, "Fun shortboard conditions!")
    return None


def _great_condition(data: HintsInput) -> Optional[HintOutcome]:
    if data.surf_rating >= 7 and not data.safety_reasons:
        return HintOutcome(HintTag.GREAT_CONDITION, GREAT_MESSAGE)
    return None


HINT_RULES: Tuple[HintRule, ...] = (
    HintRule("safety", _safety),
    HintRule("wave_extremes", _wave_extremes),
    HintRule("wind", _wind),
    HintRule("swell", _swell),
    HintRule("period", _period),
    HintRule("board_tip", _board_tip),
    HintRule("great_condition", _great_condition, only_if_silent=True, reserved_slot=True),
)


def generate_hints(data: HintsInput, rules: Tuple[HintRule, ...] = HINT_RULES) -> HintsResult:
    if data.detail is None:
        if data.safety_reasons:
            return HintsResult(tags=[HintTag.SAFETY_WARNING], message=_sentence(data.safety_reasons[0]))
        return HintsResult(tags=[], message=NO_DATA_MESSAGE)

    tags: List[HintTag] = []
    reserved: List[HintTag] = []
    fragments: List[str] = []
    for rule in rules:
        outcome = rule.evaluate(data)
        if outcome is None:
            continue
        if outcome.tag is not None:
            (reserved if rule.reserved_slot else tags).append(outcome.tag)
        if outcome.fragment and not (rule.only_if_silent and fragments):
            fragments.append(outcome.fragment)

    if fragments:
        message = " ".join(fragments[:MAX_FRAGMENTS])
    elif data.surf_rating >= 5:
        message = FALLBACK_GOOD_MESSAGE
    else:
        message = FALLBACK_POOR_MESSAGE
    reserved = reserved[:MAX_TAGS]
    return HintsResult(tags=tags[:MAX_TAGS - len(reserved)] + reserved, message=message)


def generate_public_hints(data: HintsInput) -> HintsResult:
    """Hints for anonymous callers: board tips are never given."""
    return generate_hints(data.model_copy(update={"board_type": BoardType.UNSET}))
