#!/usr/bin/env python3
"""Fill the database with demo groups, students, grades and credits, then compute predictions.

Existing rows in these tables are deleted first.
"""
import argparse
import asyncio
import random

from app.core.config import get_settings
from app.core.database import Database
from app.core.logging import setup_logging
from app.services.demo_data_service import DemoDataService
from app.services.performance_predictor import PerformancePredictor
from app.services.prediction_service import PredictionService


async def seed(students_per_group: int, seed_value: int, create_tables: bool):
    settings = get_settings()
    setup_logging(settings.log_level)

    database = Database(settings.database_url)
    predictor = PerformancePredictor(
        exam_weight=settings.prediction_exam_weight,
        credit_weight=settings.prediction_credit_weight,
    )
    try:
        if create_tables:
            await database.create_all()

        async with database.session_factory() as session:
            demo = DemoDataService(session, random.Random(seed_value))
            await demo.clear()
            created = await demo.seed(students_per_group=students_per_group)
            print(f"✅ Created {created['students']} students in {created['groups']} groups, "
                  f"{created['exam_grades']} exam grades, {created['credit_results']} credit results")

            summary = await PredictionService(session, predictor).recalculate_all()
            print(f"📊 Predictions: {summary['updated']} calculated, {summary['cleared']} without data")
    finally:
        await database.dispose()

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--students-per-group", type=int, default=10)
    parser.add_argument("--seed", type=int, default=None, help="random seed for reproducible data")
    parser.add_argument("--create-tables", action="store_true", help="create tables without Alembic")
    args = parser.parse_args()
    asyncio.run(seed(args.students_per_group, args.seed, args.create_tables))
