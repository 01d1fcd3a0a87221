from typing import Iterable, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select

from app.core.cache import CacheManager
from app.core.config import Settings
from app.core.database import Database
from app.main import create_app
from app.models import Credit, CreditResult, Exam, ExamGrade, Group, Student
from app.services.performance_predictor import PerformancePredictor

SQLITE_URL = "sqlite+aiosqlite://"


@pytest.fixture
def settings():
    return Settings(database_url=SQLITE_URL, redis_url=None, log_level="WARNING", _env_file=None)


@pytest.fixture
async def database():
    db = Database(SQLITE_URL)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session_factory() as s:
        yield s


@pytest.fixture
def predictor():
    return PerformancePredictor()


@pytest.fixture
async def client(settings, database):
    app = create_app(settings)
    # ASGITransport does not run the lifespan, wire the state by hand
    app.state.db = database
    app.state.cache = CacheManager(None)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def make_student(session):
    """Create a student with the given exam grades and credit results, committed."""

    async def _make(
        grades: Iterable[int] = (),
        credits: Iterable[bool] = (),
        group_name: str = "IS-21",
        full_name: Optional[str] = None,
    ) -> Student:
        group = (await session.execute(
            select(Group).where(Group.group_name == group_name)
        )).scalar_one_or_none()
        if group is None:
            group = Group(group_name=group_name)
            session.add(group)
            await session.flush()

        student = Student(full_name=full_name or f"Student of {group_name}", group_id=group.id)
        session.add(student)
        await session.flush()

        for i, grade in enumerate(grades):
            exam = Exam(exam_name=f"Exam {i}")
            session.add(exam)
            await session.flush()
            session.add(ExamGrade(student_id=student.id, exam_id=exam.id, grade=grade))

        for i, passed in enumerate(credits):
            credit = Credit(credit_name=f"Credit {i}")
            session.add(credit)
            await session.flush()
            session.add(CreditResult(student_id=student.id, credit_id=credit.id, is_passed=passed))

        await session.commit()
        return student

    return _make
