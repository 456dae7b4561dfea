# Filename: mediavault/routers/root.py
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from ..config import Settings, get_settings
from ..schemas import HealthOut

router = APIRouter()


@router.get("/", tags=["root"])
def root(settings: Settings = Depends(get_settings)):
    """
    Root endpoint with app version and health.
    """
    return {
        "app_name": settings.app_name,
        "app_version": settings.app_version,
        "status": "ok",
    }


@router.get("/health", response_model=HealthOut, tags=["root"])
def health():
    return HealthOut(status="OK", timestamp=datetime.now(timezone.utc))
