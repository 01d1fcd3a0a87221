# app/models/__init__.py
"""Import all models here, if needed for Alembic migration."""
from .base import Base
from .student import Group, Student
from .grades import Exam, Credit, ExamGrade, CreditResult
from .performance_prediction import PerformancePrediction

__all__ = [
    "Base",
    "Group",
    "Student",
    "Exam",
    "Credit",
    "ExamGrade",
    "CreditResult",
    "PerformancePrediction",
]
