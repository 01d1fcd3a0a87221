# app/models/student.py
from sqlalchemy import Column, String, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import Base


class Group(Base):
    __tablename__ = "groups"

    group_name = Column(String(50), unique=True, nullable=False, index=True)

    students = relationship("Student", back_populates="group")


class Student(Base):
    __tablename__ = "students"

    full_name = Column(String(200), nullable=False)
    group_id = Column(Uuid(as_uuid=True), ForeignKey("groups.id"), nullable=False, index=True)

    # Relationships
    group = relationship("Group", back_populates="students")
    exam_grades = relationship("ExamGrade", back_populates="student", cascade="all, delete-orphan", passive_deletes=True)
    credit_results = relationship("CreditResult", back_populates="student", cascade="all, delete-orphan", passive_deletes=True)
    prediction = relationship("PerformancePrediction", back_populates="student", uselist=False, passive_deletes=True)
