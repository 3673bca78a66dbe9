"""Per-spot payloads merging the rating, its hints and a condition summary.

This is the seam where the rating core meets dashboard and spot-detail
callers. A spot with no usable forecast still gets a report: no rating, the
no-data hints, and no condition summary.
"""

from __future__ import annotations

from typing import Iterable, List

from app.domain import (
    BoardType,
    ForecastSample,
    HintsResult,
    RatingResult,
    SimpleCondition,
    SpotProfile,
    UserContext,
    StrictBaseModel,
)
from app.errors import IncompleteForecastError
from app.hints import HintsInput, generate_hints
from app.rating_config import DEFAULT_RATING_CONFIG, RatingConfig
from app.rating_engine import calculate_surf_rating, summarize_conditions
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="spot_report")


class SpotForecast(StrictBaseModel):
    """A spot together with its current forecast sample, if any."""
    spot_id: str
    name: str | None = None
    spot: SpotProfile
    sample: ForecastSample | None = None


class SpotReport(StrictBaseModel):
    spot_id: str
    name: str | None = None
    rating: RatingResult | None = None
    hints: HintsResult
    condition: SimpleCondition | None = None


def build_spot_report(
    entry: SpotForecast,
    user: UserContext,
    *,
    public: bool = False,
    config: RatingConfig = DEFAULT_RATING_CONFIG,
) -> SpotReport:
    """Rate one spot and attach hints; ``public`` drops board-specific tips."""
    board = BoardType.UNSET if public else user.board_type

    if entry.sample is None:
        return SpotReport(spot_id=entry.spot_id, name=entry.name, hints=generate_hints(HintsInput.no_data()))

    try:
        rating = calculate_surf_rating(entry.spot, entry.sample, user, config)
    except IncompleteForecastError as exc:
        logger.warning("Spot %s has an incomplete forecast (%s); reporting as no data", entry.spot_id, exc)
        return SpotReport(spot_id=entry.spot_id, name=entry.name, hints=generate_hints(HintsInput.no_data()))

    hints = generate_hints(HintsInput.from_rating(rating, entry.sample, board, config))
    return SpotReport(
        spot_id=entry.spot_id,
        name=entry.name,
        rating=rating,
        hints=hints,
        condition=summarize_conditions(entry.sample, config),
    )


def build_dashboard(
    entries: Iterable[SpotForecast],
    user: UserContext,
    *,
    public: bool = False,
    config: RatingConfig = DEFAULT_RATING_CONFIG,
) -> List[SpotReport]:
    """Reports for many spots, best rating first; spots without data sort last."""
    reports = [build_spot_report(entry, user, public=public, config=config) for entry in entries]
    logger.debug("Built dashboard for %d spots", len(reports))
    return sorted(reports, key=lambda r: -1.0 if r.rating is None else r.rating.surf_rating, reverse=True)
