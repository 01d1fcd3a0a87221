# app/core/exceptions.py
"""Custom exceptions for the performance prediction service."""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from typing import Any, Optional
import logging

logger = logging.getLogger(__name__)


class PredictionServiceError(Exception):
    """Base exception for the prediction service"""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class MalformedInputError(PredictionServiceError):
    """A grade outside 2-5 or a non-boolean credit flag reached the predictor."""
    status_code = 422

    def __init__(self, message: str, value: Any = None):
        self.value = value
        super().__init__(message)


class StudentNotFoundError(PredictionServiceError):
    status_code = 404

    def __init__(self, student_id: Any):
        self.student_id = student_id
        super().__init__(f"Student not found with id: {student_id}")


class PredictionNotFoundError(PredictionServiceError):
    status_code = 404

    def __init__(self, message: str = "Prediction not found"):
        super().__init__(message)


class PersistenceError(PredictionServiceError):
    """Storing a prediction failed; the transaction was rolled back and can be retried."""
    status_code = 503
    retryable = True


async def prediction_exception_handler(request: Request, exc: PredictionServiceError):
    """Handle custom service exceptions"""
    logger.error(f"{exc.__class__.__name__}: {exc.message} - Path: {request.url.path}")
    content = {"error": exc.message, "type": exc.__class__.__name__}
    if getattr(exc, "retryable", False):
        content["retryable"] = True
    return JSONResponse(status_code=exc.status_code, content=content)


async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.exception(f"Unexpected error: {str(exc)} - Path: {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "type": "InternalError"}
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(PredictionServiceError, prediction_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
