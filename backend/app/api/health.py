import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.models.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/")
async def health_check():

    return {
        "status": "healthy",
        "service": "Interview Coach API",
        "version": "1.0.0"
    }

@router.get("/ready")
async def readiness_check(db: Session = Depends(get_db)):

    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError:
        logger.warning("Database readiness check failed", exc_info=True)
        database = "unavailable"

    return {
        "status": "ready" if database == "ok" else "degraded",
        "dependencies": {
            "database": database,
            "llm": "configured" if settings.LLM_API_KEY else "fallback"
        }
    }
