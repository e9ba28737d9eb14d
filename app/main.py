# -*- coding: utf-8 -*-
"""
backend/app/main.py

Punto de entrada principal del backend de Anne Creations.

Ajustes clave:
- Uso de app.core.settings como fachada de configuración.
- Logging centralizado (plain/pretty/json) antes de montar la app.
- Montaje de observabilidad Prometheus (/metrics) vía app.observability.prom
- Scheduler con el barrido de checkouts vencidos (checkout_expire_pending)
- Errores de dominio → JSON {"detail": {...}} con error_code estable
- Health principal /health delegado al paquete app.routes (health_routes.py)

Autor: Anne Creations
Fecha: 2026-03-09
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

# ---------------------------------------------------------------------------
# Cargar .env ANTES de cualquier import que use os.getenv
# En DEV: override=True para que .env mande sobre variables del entorno
# En PROD: override=False para respetar variables del entorno
# ---------------------------------------------------------------------------
from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_PYTHON_ENV = os.getenv("PYTHON_ENV", "development").strip().strip('"').strip("'").lower()
_override_env = _PYTHON_ENV == "development"
load_dotenv(dotenv_path=_ENV_PATH, override=_override_env)

import anyio
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.logging import setup_logging
from app.core.settings import get_settings
from app.modules.checkout.jobs import register_checkout_sweep_job
from app.observability.prom import setup_observability
from app.shared.errors import register_exception_handlers
from app.shared.middleware import JSONExceptionMiddleware
from app.shared.orm import register_models
from app.shared.scheduler import SchedulerService

setup_logging()
logger = logging.getLogger(__name__)

logger.info("[dotenv] Loaded %s (override=%s, PYTHON_ENV=%s)", _ENV_PATH, _override_env, _PYTHON_ENV)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ────────── STARTUP ──────────
    settings = get_settings()
    register_models()

    scheduler = SchedulerService()
    app.state.scheduler = scheduler
    if settings.checkout_sweep_enabled:
        register_checkout_sweep_job(
            scheduler,
            interval_minutes=settings.checkout_sweep_interval_minutes,
        )
    scheduler.start()
    logger.info("Scheduler iniciado jobs=%d", len(scheduler.get_jobs()))

    logger.info("Backend de Anne Creations iniciado (env=%s)", settings.python_env)
    try:
        yield
    finally:
        # ────────── SHUTDOWN ──────────
        logger.info("Iniciando shutdown ordenado...")
        with anyio.CancelScope(shield=True):
            scheduler.shutdown(wait=True)
            logger.info("Scheduler detenido")
        logger.info("Backend de Anne Creations apagado.")


openapi_tags = [
    {"name": "cart", "description": "Carrito del cliente"},
    {"name": "checkout", "description": "Checkout con TTL del lado del servidor"},
    {"name": "coupons", "description": "Cupones manuales y automáticos"},
    {"name": "payments", "description": "Órdenes de pago y verificación Razorpay"},
    {"name": "orders", "description": "Órdenes y su historial"},
    {"name": "downloads", "description": "Enlaces firmados de descarga"},
]

app = FastAPI(
    title="Anne Creations API",
    description="Checkout, cupones, pagos Razorpay y descargas de Anne Creations",
    version=get_settings().app_version,
    lifespan=lifespan,
    openapi_tags=openapi_tags,
)


def _configure_cors(app_instance: FastAPI) -> dict:
    """
    Configura CORS middleware.

    En producción un wildcard desactiva credenciales.

    Returns:
        dict con la configuración aplicada para logging.
    """
    settings = get_settings()
    origins_list = settings.get_cors_origins()
    is_wildcard_only = origins_list == ["*"]

    if is_wildcard_only and settings.is_prod:
        logger.warning("CORS wildcard en producción: allow_credentials=False")

    cors_config = {
        "allow_origins": origins_list,
        # "*" con allow_credentials=True es inválido en navegadores
        "allow_credentials": not is_wildcard_only,
        "allow_methods": ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        "allow_headers": ["*"],
        "expose_headers": ["X-Request-ID", "Content-Disposition"],
        "max_age": 600,
    }
    app_instance.add_middleware(CORSMiddleware, **cors_config)
    logger.info("CORS configurado origins=%s credentials=%s", origins_list, cors_config["allow_credentials"])
    return cors_config


# El orden real de ejecución de middlewares en Starlette es inverso al registro:
# CORS se registra al final para ejecutarse primero (outermost).
register_exception_handlers(app)
app.add_middleware(JSONExceptionMiddleware)
setup_observability(app, http_metrics=get_settings().http_metrics_enabled)
_cors_config = _configure_cors(app)

# Incluye router maestro
from app.routes import router as main_router  # noqa: E402

app.include_router(main_router)


@app.get("/")
async def root():
    return {"service": "Anne Creations Backend", "status": "active"}


if __name__ == "__main__":
    settings = get_settings()

    enable_reload = settings.is_dev and os.getenv("DISABLE_RELOAD", "").lower() not in ("true", "1", "yes")
    logger.info("Starting server with reload=%s (env=%s)", enable_reload, settings.python_env)

    uvicorn.run(
        "app.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=enable_reload,
        reload_excludes=["*.log", "tests/*", "storage/*"] if enable_reload else None,
    )

# Fin del archivo backend/app/main.py
