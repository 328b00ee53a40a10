"""Liveness and database connectivity."""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check database failure: {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "degraded", "database": "unavailable", "env": settings.ENV},
        )
    return {"status": "ok", "database": "ok", "env": settings.ENV}
