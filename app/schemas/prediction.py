# app/schemas/prediction.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from uuid import UUID
from datetime import datetime
from decimal import Decimal


class PredictionOut(BaseModel):
    id: UUID
    student_id: UUID
    predicted_exam_grade: Optional[Decimal] = None
    predicted_credit_pass_rate: Optional[Decimal] = None
    overall_performance_score: Optional[Decimal] = None
    prediction_date: datetime

    model_config = ConfigDict(from_attributes=True)


class PredictionListItem(PredictionOut):
    full_name: str
    group_name: str


class CalculationResponse(BaseModel):
    """Outcome of an on-demand recalculation"""
    status: str = Field(..., description="'calculated' or 'insufficient_data'")
    message: str
    prediction: Optional[PredictionOut] = None


class RecalculationSummary(BaseModel):
    processed: int = 0
    updated: int = 0
    cleared: int = 0


class GroupStatistics(BaseModel):
    group_name: str
    total_students: int
    students_with_predictions: int
    avg_performance_score: Optional[Decimal] = None
    avg_exam_grade: Optional[Decimal] = None
    avg_credit_pass_rate: Optional[Decimal] = None
