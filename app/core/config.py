# app/core/config.py
"""Application configuration using Pydantic."""
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings
from typing import List, Optional

from ..services.performance_predictor import validate_weights

class Settings(BaseSettings):
    database_url: str
    redis_url: Optional[str] = None

    app_version: str = '1.0.0'
    environment: str = 'development'
    log_level: str = 'INFO'
    allowed_origins: List[str] = ['*']

    # Connection pool (ignored by SQLite)
    db_pool_size: int = 10
    db_max_overflow: int = 20

    # Weighting of the overall performance score
    prediction_exam_weight: float = 0.7
    prediction_credit_weight: float = 0.3

    cache_ttl_seconds: int = 300

    model_config = {
        'env_file': '.env',
        'extra': 'ignore'
    }

    @field_validator('allowed_origins', mode='before')
    @classmethod
    def _split_origins(cls, v):
        if isinstance(v, str):
            return [s.strip() for s in v.split(',') if s.strip()]
        return v

    @field_validator('log_level')
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode='after')
    def _check_weights(self):
        validate_weights(self.prediction_exam_weight, self.prediction_credit_weight)
        return self


def get_settings() -> Settings:
    return Settings()
