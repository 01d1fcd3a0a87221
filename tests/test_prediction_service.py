import asyncio
import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from app.core.database import Database
from app.core.exceptions import PersistenceError, StudentNotFoundError
from app.models import CreditResult, Exam, ExamGrade, Group, PerformancePrediction, Student
from app.services.performance_predictor import PerformancePredictor
from app.services.prediction_service import PredictionService


async def count_predictions(database, student_id=None) -> int:
    async with database.session_factory() as s:
        stmt = select(func.count()).select_from(PerformancePrediction)
        if student_id is not None:
            stmt = stmt.where(PerformancePrediction.student_id == student_id)
        return (await s.execute(stmt)).scalar()


async def stored_prediction(database, student_id):
    async with database.session_factory() as s:
        return (await s.execute(
            select(PerformancePrediction).where(PerformancePrediction.student_id == student_id)
        )).scalar_one_or_none()


async def test_load_inputs(session, make_student):
    student = await make_student(grades=[5, 3], credits=[True, False, True])

    grades, credits = await PredictionService(session).load_inputs(student.id)

    assert sorted(grades) == [3, 5]
    assert sorted(credits) == [False, True, True]


async def test_recalculate_stores_prediction(session, database, make_student):
    student = await make_student(grades=[5, 5, 4])

    prediction = await PredictionService(session).recalculate(student.id)

    assert prediction.predicted_exam_grade == Decimal("4.67")
    assert prediction.predicted_credit_pass_rate is None
    assert prediction.overall_performance_score == Decimal("89.00")

    stored = await stored_prediction(database, student.id)
    assert stored.id == prediction.id
    assert stored.overall_performance_score == Decimal("89.00")
    assert stored.prediction_date is not None


async def test_recalculate_replaces_previous_prediction(session, database, make_student):
    student = await make_student(grades=[3, 3], credits=[True, False])
    service = PredictionService(session)
    first = await service.recalculate(student.id)

    exam_grade = (await session.execute(
        select(ExamGrade).where(ExamGrade.student_id == student.id)
    )).scalars().first()
    exam_grade.grade = 5
    await session.commit()

    second = await service.recalculate(student.id)

    assert await count_predictions(database, student.id) == 1
    stored = await stored_prediction(database, student.id)
    assert stored.id == second.id != first.id
    assert stored.predicted_exam_grade == Decimal("4.00")
    assert stored.overall_performance_score == Decimal("61.67")


async def test_recalculate_without_data_clears_stale_prediction(session, database, make_student):
    student = await make_student(credits=[True])
    service = PredictionService(session)
    await service.recalculate(student.id)
    assert await count_predictions(database, student.id) == 1

    credit_result = (await session.execute(
        select(CreditResult).where(CreditResult.student_id == student.id)
    )).scalar_one()
    await session.delete(credit_result)
    await session.commit()

    assert await service.recalculate(student.id) is None
    assert await count_predictions(database, student.id) == 0


async def test_recalculate_without_data_is_idempotent(session, database, make_student):
    student = await make_student()
    service = PredictionService(session)

    assert await service.recalculate(student.id) is None
    assert await service.recalculate(student.id) is None
    assert await count_predictions(database) == 0


async def test_recalculate_unknown_student(session):
    with pytest.raises(StudentNotFoundError):
        await PredictionService(session).recalculate(uuid.uuid4())


async def test_recalculate_uses_predictor_weights(session, make_student):
    student = await make_student(grades=[5], credits=[False])
    service = PredictionService(session, PerformancePredictor(exam_weight=0.5, credit_weight=0.5))

    prediction = await service.recalculate(student.id)

    assert prediction.overall_performance_score == Decimal("50.00")


async def test_storage_failure_rolls_back(session, database, make_student, monkeypatch):
    student = await make_student(grades=[4])
    service = PredictionService(session)
    original = await service.recalculate(student.id)
    # rollback expires every instance in the session, keep plain ids
    student_id, original_id = student.id, original.id

    async def broken_load(student_id):
        raise OperationalError("SELECT grade FROM exam_grades", {}, Exception("connection lost"))

    monkeypatch.setattr(service, "load_inputs", broken_load)

    with pytest.raises(PersistenceError) as exc_info:
        await service.recalculate(student_id)

    assert exc_info.value.retryable is True
    stored = await stored_prediction(database, student_id)
    assert stored.id == original_id
    assert await count_predictions(database, student_id) == 1


async def test_one_prediction_per_student_is_enforced(session, make_student):
    student = await make_student(grades=[4])
    now = datetime.now(timezone.utc)
    session.add_all([
        PerformancePrediction(student_id=student.id, overall_performance_score=Decimal("66.67"), prediction_date=now),
        PerformancePrediction(student_id=student.id, overall_performance_score=Decimal("10.00"), prediction_date=now),
    ])

    with pytest.raises(IntegrityError):
        await session.commit()
    await session.rollback()


async def test_recalculate_all(session, database, make_student):
    await make_student(grades=[5, 4], group_name="IS-21")
    await make_student(credits=[True, False], group_name="IS-21")
    await make_student(group_name="PI-22")

    summary = await PredictionService(session).recalculate_all()

    assert summary == {"processed": 3, "updated": 2, "cleared": 1}
    assert await count_predictions(database) == 2


async def test_list_predictions_filters(session, make_student):
    good = await make_student(grades=[5, 5], group_name="IS-21", full_name="Ivanov Ivan")
    await make_student(grades=[2, 3], group_name="IS-21")
    await make_student(grades=[5], credits=[True], group_name="PI-22")
    service = PredictionService(session)
    await service.recalculate_all()

    everything = await service.list_predictions()
    assert everything["total"] == 3

    by_group = await service.list_predictions(group_name="IS-21")
    assert by_group["total"] == 2
    assert {item["group_name"] for item in by_group["items"]} == {"IS-21"}

    top = await service.list_predictions(group_name="IS-21", min_score=90)
    assert top["total"] == 1
    assert top["items"][0]["student_id"] == good.id
    assert top["items"][0]["full_name"] == "Ivanov Ivan"

    low = await service.list_predictions(max_score=20)
    assert low["total"] == 1
    assert low["items"][0]["overall_performance_score"] == Decimal("16.67")


async def test_list_predictions_paginates(session, make_student):
    for _ in range(5):
        await make_student(grades=[4])
    service = PredictionService(session)
    await service.recalculate_all()

    page = await service.list_predictions(page=2, size=2)

    assert page["total"] == 5
    assert len(page["items"]) == 2


async def test_group_statistics(session, make_student):
    await make_student(grades=[5], credits=[True], group_name="IS-21")
    await make_student(grades=[2], credits=[False], group_name="IS-21")
    await make_student(group_name="IS-21")
    await make_student(group_name="PI-22")
    service = PredictionService(session)
    await service.recalculate_all()

    statistics = {row["group_name"]: row for row in await service.group_statistics()}

    assert statistics["IS-21"]["total_students"] == 3
    assert statistics["IS-21"]["students_with_predictions"] == 2
    assert statistics["IS-21"]["avg_performance_score"] == Decimal("50.00")
    assert statistics["IS-21"]["avg_exam_grade"] == Decimal("3.50")
    assert statistics["IS-21"]["avg_credit_pass_rate"] == Decimal("50.00")

    assert statistics["PI-22"]["total_students"] == 1
    assert statistics["PI-22"]["students_with_predictions"] == 0
    assert statistics["PI-22"]["avg_performance_score"] is None


async def test_delete_prediction(session, database, make_student):
    student = await make_student(grades=[4])
    service = PredictionService(session)
    prediction = await service.recalculate(student.id)

    assert await service.delete_prediction(prediction.id) is True
    assert await service.delete_prediction(prediction.id) is False
    assert await count_predictions(database) == 0


async def test_concurrent_recalculations_keep_one_row(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'predictions.db'}")
    await database.create_all()
    try:
        async with database.session_factory() as s:
            group = Group(group_name="IS-21")
            s.add(group)
            await s.flush()
            student = Student(full_name="Sidorov Petr", group_id=group.id)
            exam = Exam(exam_name="Math")
            s.add_all([student, exam])
            await s.flush()
            s.add(ExamGrade(student_id=student.id, exam_id=exam.id, grade=4))
            await s.commit()
            student_id = student.id

        async def recalculate_once():
            async with database.session_factory() as s:
                return await PredictionService(s).recalculate(student_id)

        results = await asyncio.gather(*(recalculate_once() for _ in range(8)))

        assert all(r.overall_performance_score == Decimal("66.67") for r in results)
        assert await count_predictions(database, student_id) == 1
        stored = await stored_prediction(database, student_id)
        assert stored.id in {r.id for r in results}
    finally:
        await database.dispose()
