#!/usr/bin/env python3
"""Recalculate the performance prediction of every student."""
import asyncio

from app.core.config import get_settings
from app.core.database import Database
from app.core.logging import setup_logging
from app.services.performance_predictor import PerformancePredictor
from app.services.prediction_service import PredictionService


async def recalculate():
    settings = get_settings()
    setup_logging(settings.log_level)

    database = Database(settings.database_url)
    predictor = PerformancePredictor(
        exam_weight=settings.prediction_exam_weight,
        credit_weight=settings.prediction_credit_weight,
    )
    try:
        async with database.session_factory() as session:
            summary = await PredictionService(session, predictor).recalculate_all()
        print(f"✅ Processed {summary['processed']} students: "
              f"{summary['updated']} updated, {summary['cleared']} without data")
    finally:
        await database.dispose()

if __name__ == "__main__":
    asyncio.run(recalculate())
