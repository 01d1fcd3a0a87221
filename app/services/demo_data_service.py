# app/services/demo_data_service.py
"""Random but plausible groups, students, grades and credit results for demos."""
import random
from typing import Dict, List, Optional
import logging

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Group, Student, Exam, Credit, ExamGrade, CreditResult, PerformancePrediction

logger = logging.getLogger(__name__)

GROUP_NAMES = ["IS-21", "IS-22", "PI-21", "PI-22", "KB-21"]
EXAM_NAMES = ["Mathematical Analysis", "Linear Algebra", "Programming", "Databases", "Physics"]
CREDIT_NAMES = ["Physical Education", "History", "Foreign Language", "Philosophy", "Economics"]

FIRST_NAMES = [
    "Alexander", "Dmitry", "Maxim", "Sergey", "Andrey", "Ilya", "Kirill", "Mikhail",
    "Anna", "Maria", "Elena", "Olga", "Tatiana", "Irina", "Daria", "Ksenia",
]
LAST_NAMES = [
    "Ivanov", "Petrov", "Sidorov", "Smirnov", "Kuznetsov", "Popov", "Sokolov", "Lebedev",
    "Kozlov", "Morozov", "Volkov", "Pavlov", "Semenov", "Orlov", "Titov", "Borisov",
]

# 3, 4 and 5 are more likely than a failing 2
GRADES = [2, 3, 4, 5]
GRADE_WEIGHTS = [0.1, 0.2, 0.4, 0.3]

EXAM_GRADE_PROBABILITY = 0.7
CREDIT_RESULT_PROBABILITY = 0.9
CREDIT_PASS_PROBABILITY = 0.85


class DemoDataService:
    def __init__(self, db: AsyncSession, rng: Optional[random.Random] = None):
        self.db = db
        self.rng = rng or random.Random()

    async def clear(self):
        """Remove all demo-relevant rows, dependants first."""
        for model in (PerformancePrediction, CreditResult, ExamGrade, Student, Exam, Credit, Group):
            await self.db.execute(delete(model))
        await self.db.commit()

    def _full_name(self) -> str:
        return f"{self.rng.choice(LAST_NAMES)} {self.rng.choice(FIRST_NAMES)}"

    async def seed(self, students_per_group: int = 10) -> Dict[str, int]:
        """Create reference data and random grades. Predictions are not computed here."""
        groups = [Group(group_name=name) for name in GROUP_NAMES]
        exams = [Exam(exam_name=name) for name in EXAM_NAMES]
        credits = [Credit(credit_name=name) for name in CREDIT_NAMES]
        self.db.add_all([*groups, *exams, *credits])
        await self.db.flush()

        students: List[Student] = []
        for group in groups:
            for _ in range(students_per_group):
                students.append(Student(full_name=self._full_name(), group_id=group.id))
        self.db.add_all(students)
        await self.db.flush()

        grade_count = 0
        credit_count = 0
        for student in students:
            for exam in exams:
                if self.rng.random() < EXAM_GRADE_PROBABILITY:
                    grade = self.rng.choices(GRADES, weights=GRADE_WEIGHTS)[0]
                    self.db.add(ExamGrade(student_id=student.id, exam_id=exam.id, grade=grade))
                    grade_count += 1
            for credit in credits:
                if self.rng.random() < CREDIT_RESULT_PROBABILITY:
                    passed = self.rng.random() < CREDIT_PASS_PROBABILITY
                    self.db.add(CreditResult(student_id=student.id, credit_id=credit.id, is_passed=passed))
                    credit_count += 1

        await self.db.commit()
        summary = {
            "groups": len(groups),
            "students": len(students),
            "exam_grades": grade_count,
            "credit_results": credit_count,
        }
        logger.info(f"Demo data created: {summary}")
        return summary
