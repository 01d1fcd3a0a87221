from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging
import time

from .core.cache import CacheManager
from .core.config import Settings, get_settings
from .core.database import Database
from .core.exceptions import register_exception_handlers
from .core.logging import setup_logging
from .routers import health, predictions
from .services.performance_predictor import PerformancePredictor

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Performance Prediction API")

        app.state.db = Database(
            settings.database_url,
            echo=(settings.environment == 'development' and settings.log_level == 'DEBUG'),
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )
        app.state.cache = CacheManager(settings.redis_url)
        await app.state.cache.connect()
        logger.info("Database and cache initialized")

        yield

        logger.info("Shutting down Performance Prediction API")
        await app.state.cache.disconnect()
        await app.state.db.dispose()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Performance Prediction API",
        description="Exam grade and credit based student performance predictions",
        version=settings.app_version,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.predictor = PerformancePredictor(
        exam_weight=settings.prediction_exam_weight,
        credit_weight=settings.prediction_credit_weight,
    )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        logger.info(f"{request.method} {request.url.path} - {process_time:.3f}s")
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=3600,
    )

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(predictions.router)

    @app.get("/")
    async def root():
        return {
            "message": "Performance Prediction API",
            "version": settings.app_version,
            "status": "active"
        }

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:create_app", factory=True, host="0.0.0.0", port=8000, reload=True)
