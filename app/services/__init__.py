from .base_service import BaseService
from .performance_predictor import PerformancePredictor, predict_performance
from .prediction_service import PredictionService

__all__ = [
    "BaseService",
    "PerformancePredictor",
    "predict_performance",
    "PredictionService",
]
