# -*- coding: utf-8 -*-
"""
backend/app/routes/health_routes.py

Endpoints de health check del backend de Anne Creations.

Autor: Anne Creations
Fecha: 2026-03-09
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from app.core.db import check_database_health
from app.core.settings import get_settings

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    summary="Health check del backend",
    description="Estado básico del backend con verificación de conectividad a la base de datos.",
)
async def health_check() -> dict:
    settings = get_settings()

    db_ok = await check_database_health()

    return {
        "status": "ok" if db_ok else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.python_env,
        "database": {
            "reachable": db_ok,
        },
        "service": {
            "name": settings.app_name,
            "version": settings.app_version,
        },
    }


@router.get("/api/health/live", summary="Liveness")
async def health_live() -> dict:
    return {"live": True}

# Fin del archivo backend/app/routes/health_routes.py
