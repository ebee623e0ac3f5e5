"""Evaluation API routes: calculate, history and detail."""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from finratio.api.deps import get_current_user, get_db
from finratio.models.user import User
from finratio.schemas.evaluation import (
    EvaluationDetail,
    EvaluationRequest,
    EvaluationSnapshot,
    RatioEvaluationResult,
)
from finratio.services.evaluation_service import EvaluationService

router = APIRouter()


@router.post("/calculate", response_model=list[RatioEvaluationResult])
async def calculate_evaluations(
    data: EvaluationRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Calculate every active ratio over the window and store the snapshots.

    Recalculating the same window overwrites the previous snapshots.
    """
    service = EvaluationService(db)
    return await service.calculate_and_store_evaluations(current_user.id, data.start_date, data.end_date)


@router.get("/history", response_model=list[EvaluationSnapshot])
async def evaluation_history(
    start_date: date | None = None,
    end_date: date | None = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List stored snapshots whose window overlaps the optional date range."""
    service = EvaluationService(db)
    return await service.get_evaluation_history(current_user.id, start_date, end_date)


@router.get("/{evaluation_id}", response_model=EvaluationDetail)
async def evaluation_detail(
    evaluation_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get one snapshot with its numerator, denominator and conceptual breakdown."""
    service = EvaluationService(db)
    return await service.get_evaluation_detail(evaluation_id, current_user.id)
