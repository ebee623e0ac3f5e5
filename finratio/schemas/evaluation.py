"""Evaluation schemas: calculation request, per-ratio results, history and detail."""

from datetime import date, datetime

from pydantic import BaseModel

from finratio.models.evaluation import EvaluationStatus


class EvaluationRequest(BaseModel):
    start_date: date
    end_date: date


class RatioEvaluationResult(BaseModel):
    ratio_id: int
    ratio_code: str
    ratio_title: str
    value: float  # 0 when status is INCOMPLETE or is_unbounded
    status: EvaluationStatus
    is_unbounded: bool = False
    ideal_range_display: str | None = None


class EvaluationSnapshot(BaseModel):
    id: int
    ratio_id: int
    ratio_code: str
    ratio_title: str
    start_date: date
    end_date: date
    value: float
    status: EvaluationStatus
    is_unbounded: bool
    calculated_at: datetime


class BreakdownComponent(BaseModel):
    name: str
    value: float


class EvaluationDetail(EvaluationSnapshot):
    ideal_range_display: str | None = None
    breakdown_components: list[BreakdownComponent]
    calculated_numerator: float
    calculated_denominator: float
