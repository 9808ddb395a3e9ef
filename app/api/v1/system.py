# app/api/v1/system.py

from datetime import datetime
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.database import get_db
from app.core.config import Settings, get_settings

router = APIRouter()


@router.get("/health")
def health_check(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    """서비스 헬스체크 (DB 연결 포함)"""
    try:
        db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError:
        database = "disconnected"

    return {
        "status": "OK" if database == "connected" else "DEGRADED",
        "service": settings.app_name,
        "database": database,
        "timestamp": datetime.utcnow().isoformat(),
    }
