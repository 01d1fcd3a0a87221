# app/services/prediction_service.py
"""Loading grade data, recalculating and storing performance predictions."""
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
from datetime import datetime, timezone
from decimal import Decimal
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError

from .base_service import BaseService
from .performance_predictor import (
    PerformancePredictor, PredictionResult, InsufficientData, round2
)
from ..core.exceptions import MalformedInputError, PersistenceError, StudentNotFoundError
from ..models import PerformancePrediction, Student, Group, ExamGrade, CreditResult

logger = logging.getLogger(__name__)


class PredictionService(BaseService[PerformancePrediction]):
    def __init__(self, db: AsyncSession, predictor: Optional[PerformancePredictor] = None):
        super().__init__(PerformancePrediction, db)
        self.predictor = predictor or PerformancePredictor()

    async def load_inputs(self, student_id: UUID) -> Tuple[List[int], List[bool]]:
        """Read the recorded exam grades and credit outcomes of one student."""
        grades = await self.db.execute(
            select(ExamGrade.grade).where(ExamGrade.student_id == student_id)
        )
        credits = await self.db.execute(
            select(CreditResult.is_passed).where(CreditResult.student_id == student_id)
        )
        return list(grades.scalars().all()), list(credits.scalars().all())

    async def recalculate(self, student_id: UUID) -> Optional[PerformancePrediction]:
        """Recompute and store the prediction of one student.

        Returns the new row, or ``None`` when the student has no grades and no
        credit results (any stale prediction is removed in that case). The
        student row is locked for the duration of the transaction so two
        recalculations for the same student cannot interleave their delete and
        insert.
        """
        try:
            locked = await self.db.execute(
                select(Student.id).where(Student.id == student_id).with_for_update()
            )
            if locked.scalar_one_or_none() is None:
                raise StudentNotFoundError(student_id)

            exam_grades, credit_results = await self.load_inputs(student_id)
            result = self.predictor.predict(exam_grades, credit_results)
            prediction = await self._replace(student_id, result)
            await self.db.commit()
        except (StudentNotFoundError, MalformedInputError):
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Storing prediction for student {student_id} failed: {e}")
            raise PersistenceError(
                f"Failed to store prediction for student {student_id}, please retry"
            ) from e

        if prediction is None:
            logger.info(f"Student {student_id} has no grade data, prediction cleared")
        else:
            logger.info(
                f"Prediction for student {student_id}: "
                f"overall={prediction.overall_performance_score}"
            )
        return prediction

    async def _replace(self, student_id: UUID, result: PredictionResult) -> Optional[PerformancePrediction]:
        await self.db.execute(
            delete(PerformancePrediction).where(PerformancePrediction.student_id == student_id)
        )
        if isinstance(result, InsufficientData):
            return None

        prediction = PerformancePrediction(
            student_id=student_id,
            predicted_exam_grade=result.predicted_exam_grade,
            predicted_credit_pass_rate=result.predicted_credit_pass_rate,
            overall_performance_score=result.overall_performance_score,
            prediction_date=datetime.now(timezone.utc),
        )
        self.db.add(prediction)
        await self.db.flush()
        return prediction

    async def recalculate_all(self) -> Dict[str, int]:
        """Recompute predictions for every student, one student at a time."""
        result = await self.db.execute(select(Student.id).order_by(Student.created_at, Student.id))
        student_ids = result.scalars().all()

        summary = {"processed": 0, "updated": 0, "cleared": 0}
        for student_id in student_ids:
            try:
                prediction = await self.recalculate(student_id)
            except StudentNotFoundError:
                # removed while the loop was running
                continue
            summary["processed"] += 1
            if prediction is None:
                summary["cleared"] += 1
            else:
                summary["updated"] += 1

        logger.info(
            f"Bulk recalculation done: {summary['processed']} students, "
            f"{summary['updated']} updated, {summary['cleared']} without data"
        )
        return summary

    async def get_current(self, student_id: UUID) -> Optional[PerformancePrediction]:
        stmt = select(self.model).where(self.model.student_id == student_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def list_predictions(
        self,
        group_name: Optional[str] = None,
        min_score: Optional[float] = None,
        max_score: Optional[float] = None,
        page: int = 1,
        size: int = 20,
    ) -> Dict[str, Any]:
        """Paginated predictions, newest first, with student and group names."""
        conditions = []
        if group_name:
            conditions.append(Group.group_name == group_name)
        if min_score is not None:
            conditions.append(self.model.overall_performance_score >= min_score)
        if max_score is not None:
            conditions.append(self.model.overall_performance_score <= max_score)

        stmt = (
            select(self.model, Student.full_name, Group.group_name)
            .join(Student, Student.id == self.model.student_id)
            .join(Group, Group.id == Student.group_id)
            .where(*conditions)
        )
        count_stmt = (
            select(func.count())
            .select_from(self.model)
            .join(Student, Student.id == self.model.student_id)
            .join(Group, Group.id == Student.group_id)
            .where(*conditions)
        )

        total = (await self.db.execute(count_stmt)).scalar()

        stmt = (
            stmt.order_by(self.model.prediction_date.desc(), self.model.id)
            .offset((page - 1) * size)
            .limit(size)
        )
        rows = (await self.db.execute(stmt)).all()

        items = [
            {
                "id": prediction.id,
                "student_id": prediction.student_id,
                "full_name": full_name,
                "group_name": group,
                "predicted_exam_grade": prediction.predicted_exam_grade,
                "predicted_credit_pass_rate": prediction.predicted_credit_pass_rate,
                "overall_performance_score": prediction.overall_performance_score,
                "prediction_date": prediction.prediction_date,
            }
            for prediction, full_name, group in rows
        ]
        return {"items": items, "total": total, "page": page, "size": size}

    async def group_statistics(self) -> List[Dict[str, Any]]:
        """Per-group counts and averages of the stored predictions."""
        stmt = (
            select(
                Group.group_name,
                func.count(func.distinct(Student.id)).label("total_students"),
                func.count(self.model.id).label("students_with_predictions"),
                func.avg(self.model.overall_performance_score).label("avg_performance_score"),
                func.avg(self.model.predicted_exam_grade).label("avg_exam_grade"),
                func.avg(self.model.predicted_credit_pass_rate).label("avg_credit_pass_rate"),
            )
            .select_from(Group)
            .outerjoin(Student, Student.group_id == Group.id)
            .outerjoin(self.model, self.model.student_id == Student.id)
            .group_by(Group.id, Group.group_name)
            .order_by(Group.group_name)
        )
        rows = (await self.db.execute(stmt)).all()

        return [
            {
                "group_name": row.group_name,
                "total_students": row.total_students,
                "students_with_predictions": row.students_with_predictions,
                "avg_performance_score": _round_avg(row.avg_performance_score),
                "avg_exam_grade": _round_avg(row.avg_exam_grade),
                "avg_credit_pass_rate": _round_avg(row.avg_credit_pass_rate),
            }
            for row in rows
        ]

    async def delete_prediction(self, prediction_id: UUID) -> bool:
        try:
            return await self.hard_delete(prediction_id)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"Failed to delete prediction {prediction_id}, please retry") from e


def _round_avg(value: Any) -> Optional[Decimal]:
    # AVG comes back as float on SQLite and as a long Decimal on PostgreSQL
    if value is None:
        return None
    return round2(Decimal(str(value)))
