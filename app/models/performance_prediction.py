# app/models/performance_prediction.py
from sqlalchemy import Column, DateTime, Numeric, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import Base


class PerformancePrediction(Base):
    """Current performance snapshot of a student; at most one row per student."""
    __tablename__ = "performance_predictions"

    student_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    predicted_exam_grade = Column(Numeric(4, 2))           # 2.00 - 5.00
    predicted_credit_pass_rate = Column(Numeric(5, 2))     # 0.00 - 100.00
    overall_performance_score = Column(Numeric(5, 2))      # 0.00 - 100.00
    prediction_date = Column(DateTime(timezone=True), nullable=False)

    student = relationship("Student", back_populates="prediction")
