# app/models/grades.py
"""Exam grades and credit (pass/fail) results.

Rows are written by the grade entry layer; the prediction service only reads them.
"""
from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, Uuid, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from .base import Base


class Exam(Base):
    __tablename__ = "exams"

    exam_name = Column(String(200), nullable=False)


class Credit(Base):
    __tablename__ = "credits"

    credit_name = Column(String(200), nullable=False)


class ExamGrade(Base):
    __tablename__ = "exam_grades"
    __table_args__ = (
        UniqueConstraint("student_id", "exam_id", name="uq_exam_grade_student_exam"),
        CheckConstraint("grade BETWEEN 2 AND 5", name="ck_exam_grade_range"),
    )

    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    exam_id = Column(Uuid(as_uuid=True), ForeignKey("exams.id", ondelete="CASCADE"), nullable=False)
    grade = Column(Integer, nullable=False)  # 2 = fail, 5 = best

    student = relationship("Student", back_populates="exam_grades")
    exam = relationship("Exam")


class CreditResult(Base):
    __tablename__ = "credit_results"
    __table_args__ = (
        UniqueConstraint("student_id", "credit_id", name="uq_credit_result_student_credit"),
    )

    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    credit_id = Column(Uuid(as_uuid=True), ForeignKey("credits.id", ondelete="CASCADE"), nullable=False)
    is_passed = Column(Boolean, nullable=False)

    student = relationship("Student", back_populates="credit_results")
    credit = relationship("Credit")
