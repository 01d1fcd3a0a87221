"""Health check endpoints."""
from fastapi import APIRouter, Depends
import logging

from ..core.database import Database, get_database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["Health"])

@router.get("/")
async def health_check():
    """Basic health check"""
    return {
        "status": "healthy",
        "service": "Performance Prediction API",
    }

@router.get("/db")
async def database_health(database: Database = Depends(get_database)):
    """Database connectivity check"""
    healthy = await database.health_check()
    return {
        "status": "healthy" if healthy else "unhealthy",
        "database": database.engine.dialect.name,
    }

