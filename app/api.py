"""HTTP API for the surf rating service.

A thin adapter: it validates the request, calls the rating core and returns
its results. Spot lookup, forecast ingestion and caller identity belong to the
services in front of it.
"""

from typing import List

from fastapi import APIRouter, HTTPException

from app.domain import (
    ForecastSample,
    HintsResult,
    RatingResult,
    SimpleCondition,
    SpotProfile,
    SurfLevel,
    UserContext,
    StrictBaseModel,
)
from .config import settings
from .errors import IncompleteForecastError
from .hints import HintsInput, generate_hints, generate_public_hints
from .rating_engine import calculate_surf_rating, summarize_conditions
from .spot_report import SpotForecast, SpotReport, build_dashboard
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/api")

router = APIRouter()


class RatingRequest(StrictBaseModel):
    spot: SpotProfile
    forecast: ForecastSample
    user: UserContext


class PublicRatingRequest(StrictBaseModel):
    spot: SpotProfile
    forecast: ForecastSample
    surf_level: SurfLevel | None = None


class RatingResponse(StrictBaseModel):
    rating: RatingResult
    hints: HintsResult
    condition: SimpleCondition


class DashboardRequest(StrictBaseModel):
    spots: List[SpotForecast]
    user: UserContext | None = None


def _rate(spot: SpotProfile, forecast: ForecastSample, user: UserContext) -> RatingResult:
    try:
        return calculate_surf_rating(spot, forecast, user)
    except IncompleteForecastError as exc:
        raise HTTPException(
            status_code=422,
            detail={"message": "Forecast sample is incomplete", "missing": list(exc.missing_fields)},
        )


@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/ratings", response_model=RatingResponse)
def rate_spot(req: RatingRequest):
    """Rate a forecast sample for a known caller, board tips included."""
    rating = _rate(req.spot, req.forecast, req.user)
    hints = generate_hints(HintsInput.from_rating(rating, req.forecast, req.user.board_type))
    return RatingResponse(rating=rating, hints=hints, condition=summarize_conditions(req.forecast))


@router.post("/ratings/public", response_model=RatingResponse)
def rate_spot_public(req: PublicRatingRequest):
    """Rate a forecast sample for an anonymous caller."""
    user = UserContext(surf_level=req.surf_level or settings.default_surf_level)
    rating = _rate(req.spot, req.forecast, user)
    hints = generate_public_hints(HintsInput.from_rating(rating, req.forecast))
    return RatingResponse(rating=rating, hints=hints, condition=summarize_conditions(req.forecast))


@router.post("/dashboard", response_model=List[SpotReport])
def dashboard(req: DashboardRequest):
    """Rate a batch of spots; without a user the public variant is used."""
    if len(req.spots) > settings.max_batch_spots:
        raise HTTPException(
            status_code=413,
            detail=f"At most {settings.max_batch_spots} spots per request",
        )
    public = req.user is None
    user = req.user or UserContext(surf_level=settings.default_surf_level)
    logger.info("Dashboard request for %d spots (public=%s)", len(req.spots), public)
    return build_dashboard(req.spots, user, public=public)
