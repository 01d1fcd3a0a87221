# app/services/performance_predictor.py
"""Performance prediction from exam grades and credit results.

The predictor is pure: it takes the grades and credit outcomes of one student
and returns either a :class:`PerformanceSnapshot` or :data:`INSUFFICIENT_DATA`
when both inputs are empty.

All arithmetic is done on :class:`~decimal.Decimal` and every output field is
rounded to two places with ``ROUND_HALF_UP``. The overall score is derived from
the already-rounded exam average and pass rate, not from full-precision
intermediates.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Tuple, Union

from ..core.exceptions import MalformedInputError

MIN_GRADE = 2
MAX_GRADE = 5
VALID_GRADES = frozenset(range(MIN_GRADE, MAX_GRADE + 1))

DEFAULT_EXAM_WEIGHT = 0.7
DEFAULT_CREDIT_WEIGHT = 0.3

TWO_PLACES = Decimal("0.01")
HUNDRED = Decimal(100)
_GRADE_SPAN = Decimal(MAX_GRADE - MIN_GRADE)


@dataclass(frozen=True)
class PerformanceSnapshot:
    predicted_exam_grade: Optional[Decimal]
    predicted_credit_pass_rate: Optional[Decimal]
    overall_performance_score: Decimal


@dataclass(frozen=True)
class InsufficientData:
    """No exam grades and no credit results exist for the student."""
    reason: str = "No exam grades or credit results recorded"


INSUFFICIENT_DATA = InsufficientData()

PredictionResult = Union[PerformanceSnapshot, InsufficientData]


def round2(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def normalize_exam_grade(grade: Decimal) -> Decimal:
    """Map the closed grade range [2, 5] linearly onto [0, 100]."""
    return (grade - MIN_GRADE) / _GRADE_SPAN * HUNDRED


def _validated_grades(exam_grades: Iterable[int]) -> List[int]:
    grades = list(exam_grades)
    for grade in grades:
        # bool is an int subclass; True must not count as a grade of 1
        if isinstance(grade, bool) or not isinstance(grade, int) or grade not in VALID_GRADES:
            raise MalformedInputError(
                f"Exam grade must be an integer between {MIN_GRADE} and {MAX_GRADE}, got {grade!r}",
                value=grade,
            )
    return grades


def _validated_credits(credit_results: Iterable[bool]) -> List[bool]:
    credits = list(credit_results)
    for flag in credits:
        if not isinstance(flag, bool):
            raise MalformedInputError(
                f"Credit result must be a boolean, got {flag!r}",
                value=flag,
            )
    return credits


def _as_weight(name: str, value: float) -> Decimal:
    weight = Decimal(str(value))
    if weight < 0 or weight > 1:
        raise ValueError(f"{name} must be between 0 and 1, got {value}")
    return weight


def validate_weights(exam_weight: float, credit_weight: float) -> Tuple[Decimal, Decimal]:
    """Check that both weights lie in [0, 1] and sum to exactly 1."""
    exam = _as_weight("exam_weight", exam_weight)
    credit = _as_weight("credit_weight", credit_weight)
    if exam + credit != 1:
        raise ValueError(
            f"exam_weight and credit_weight must sum to 1, got {exam_weight} + {credit_weight}"
        )
    return exam, credit


class PerformancePredictor:
    """Blends normalized exam performance with the credit pass rate."""

    def __init__(
        self,
        exam_weight: float = DEFAULT_EXAM_WEIGHT,
        credit_weight: float = DEFAULT_CREDIT_WEIGHT,
    ):
        self.exam_weight, self.credit_weight = validate_weights(exam_weight, credit_weight)

    def predict(
        self,
        exam_grades: Iterable[int],
        credit_results: Iterable[bool],
    ) -> PredictionResult:
        grades = _validated_grades(exam_grades)
        credits = _validated_credits(credit_results)

        if not grades and not credits:
            return INSUFFICIENT_DATA

        predicted_exam_grade = None
        predicted_credit_pass_rate = None

        if grades:
            predicted_exam_grade = round2(Decimal(sum(grades)) / Decimal(len(grades)))

        if credits:
            passed = sum(1 for flag in credits if flag)
            predicted_credit_pass_rate = round2(Decimal(passed) / Decimal(len(credits)) * HUNDRED)

        if predicted_exam_grade is not None and predicted_credit_pass_rate is not None:
            overall = (
                normalize_exam_grade(predicted_exam_grade) * self.exam_weight
                + predicted_credit_pass_rate * self.credit_weight
            )
        elif predicted_exam_grade is not None:
            overall = normalize_exam_grade(predicted_exam_grade)
        else:
            overall = predicted_credit_pass_rate

        return PerformanceSnapshot(
            predicted_exam_grade=predicted_exam_grade,
            predicted_credit_pass_rate=predicted_credit_pass_rate,
            overall_performance_score=round2(overall),
        )


_default_predictor = PerformancePredictor()


def predict_performance(
    exam_grades: Iterable[int],
    credit_results: Iterable[bool],
) -> PredictionResult:
    """Predict with the default 70/30 weighting."""
    return _default_predictor.predict(exam_grades, credit_results)
