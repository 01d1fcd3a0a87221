from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.cache import CacheManager, get_cache
from ..core.database import get_db
from ..core.exceptions import PredictionNotFoundError
from ..schemas.pagination import PaginatedResponse
from ..schemas.prediction import (
    CalculationResponse, GroupStatistics, PredictionListItem, PredictionOut, RecalculationSummary
)
from ..services.performance_predictor import PerformancePredictor
from ..services.prediction_service import PredictionService

router = APIRouter(prefix="/api/v1/predictions", tags=["Performance Predictions"])

CACHE_PATTERN = "predictions:*"


def get_predictor(request: Request) -> PerformancePredictor:
    return request.app.state.predictor


def get_prediction_service(
    db: AsyncSession = Depends(get_db),
    predictor: PerformancePredictor = Depends(get_predictor),
) -> PredictionService:
    return PredictionService(db, predictor)


async def _invalidate(cache: CacheManager):
    await cache.delete_pattern(cache.make_key(CACHE_PATTERN))


@router.get("/", response_model=PaginatedResponse[PredictionListItem])
async def list_predictions(
    request: Request,
    group: Optional[str] = Query(None, description="Exact group name"),
    min_score: Optional[float] = Query(None, ge=0, le=100),
    max_score: Optional[float] = Query(None, ge=0, le=100),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    service: PredictionService = Depends(get_prediction_service),
    cache: CacheManager = Depends(get_cache),
):
    """Get predictions of all students, newest first"""
    cache_key = cache.make_key("predictions", "list", group, min_score, max_score, page, size)
    cached = await cache.get(cache_key)
    if cached is not None:
        return cached

    result = await service.list_predictions(
        group_name=group,
        min_score=min_score,
        max_score=max_score,
        page=page,
        size=size,
    )
    response = PaginatedResponse[PredictionListItem].build(
        [PredictionListItem(**item) for item in result["items"]],
        total=result["total"],
        page=page,
        size=size,
    )
    await cache.set(cache_key, jsonable_encoder(response), expire=request.app.state.settings.cache_ttl_seconds)
    return response


@router.get("/statistics/groups", response_model=List[GroupStatistics])
async def get_group_statistics(
    request: Request,
    service: PredictionService = Depends(get_prediction_service),
    cache: CacheManager = Depends(get_cache),
):
    """Prediction counts and averages per group"""
    cache_key = cache.make_key("predictions", "statistics", "groups")
    cached = await cache.get(cache_key)
    if cached is not None:
        return cached

    statistics = [GroupStatistics(**row) for row in await service.group_statistics()]
    await cache.set(cache_key, jsonable_encoder(statistics), expire=request.app.state.settings.cache_ttl_seconds)
    return statistics


@router.get("/student/{student_id}", response_model=PredictionOut)
async def get_student_prediction(
    student_id: UUID,
    service: PredictionService = Depends(get_prediction_service),
):
    """Get the current prediction of a student"""
    prediction = await service.get_current(student_id)
    if prediction is None:
        raise PredictionNotFoundError(f"No prediction found for student {student_id}")
    return prediction


@router.post("/calculate/{student_id}", response_model=CalculationResponse)
async def calculate_prediction(
    student_id: UUID,
    response: Response,
    service: PredictionService = Depends(get_prediction_service),
    cache: CacheManager = Depends(get_cache),
):
    """Recalculate a student's prediction from their current grades and credits"""
    prediction = await service.recalculate(student_id)
    await _invalidate(cache)

    if prediction is None:
        return CalculationResponse(
            status="insufficient_data",
            message="Not enough data to calculate a prediction",
        )

    response.status_code = 201
    return CalculationResponse(
        status="calculated",
        message="Prediction calculated successfully",
        prediction=PredictionOut.model_validate(prediction),
    )


@router.post("/recalculate", response_model=RecalculationSummary)
async def recalculate_all_predictions(
    service: PredictionService = Depends(get_prediction_service),
    cache: CacheManager = Depends(get_cache),
):
    """Recalculate predictions for every student"""
    summary = await service.recalculate_all()
    await _invalidate(cache)
    return RecalculationSummary(**summary)


@router.delete("/{prediction_id}")
async def delete_prediction(
    prediction_id: UUID,
    service: PredictionService = Depends(get_prediction_service),
    cache: CacheManager = Depends(get_cache),
):
    """Delete a prediction"""
    deleted = await service.delete_prediction(prediction_id)
    if not deleted:
        raise PredictionNotFoundError()

    await _invalidate(cache)
    return {"message": "Prediction deleted successfully", "id": str(prediction_id)}
