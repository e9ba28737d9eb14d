# -*- coding: utf-8 -*-
"""
backend/tests/conftest.py

Config global de tests para el backend de Anne Creations.

- PYTHON_ENV=test antes de importar la app (settings de pruebas)
- Engine SQLite en memoria (aiosqlite + StaticPool) por test, con
  Base.metadata.create_all sobre todos los modelos registrados
- App FastAPI con overrides de sesión, gateway de pagos y storage

Autor: Anne Creations
Fecha: 2026-03-10
"""

import os

# -----------------------------------------------------------------------------
# 0) Variables de entorno ANTES de importar la app
# -----------------------------------------------------------------------------
os.environ["PYTHON_ENV"] = "test"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "test-razorpay-secret"
os.environ["RAZORPAY_WEBHOOK_SECRET"] = "test-webhook-secret"

from collections.abc import AsyncIterator
from pathlib import Path
from typing import Dict
from uuid import UUID, uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from app.modules.auth.security import ROLE_ADMIN
from app.shared.config.config_loader import get_settings
from app.shared.config.settings_payments import PaymentsSettings, reset_payments_settings
from app.shared.database import Base, build_engine, build_sessionmaker
from app.shared.orm import register_models
from app.shared.storage import LocalFileStorage

from tests.factories import KEY_SECRET, WEBHOOK_SECRET, FakeGateway, bearer


@pytest.fixture(scope="session", autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    reset_payments_settings()
    yield
    get_settings.cache_clear()
    reset_payments_settings()


# -----------------------------------------------------------------------------
# 1) Base de datos
# -----------------------------------------------------------------------------
@pytest.fixture
async def db_engine():
    """Engine SQLite en memoria con el esquema completo."""
    register_models()
    eng = build_engine("sqlite+aiosqlite:///:memory:")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_sessionmaker(db_engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


# -----------------------------------------------------------------------------
# 2) Colaboradores
# -----------------------------------------------------------------------------
@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def payments_settings() -> PaymentsSettings:
    return PaymentsSettings(
        razorpay_key_id="rzp_test_key",
        razorpay_key_secret=KEY_SECRET,
        razorpay_webhook_secret=WEBHOOK_SECRET,
    )


@pytest.fixture
def storage_root(tmp_path) -> Path:
    root = tmp_path / "downloads"
    root.mkdir()
    return root


@pytest.fixture
def storage(storage_root) -> LocalFileStorage:
    return LocalFileStorage(storage_root)


# -----------------------------------------------------------------------------
# 3) App y cliente HTTP
# -----------------------------------------------------------------------------
@pytest.fixture
def app(session_factory, gateway, storage):
    """
    App principal con sesión, gateway y storage de prueba.
    ASGITransport no dispara el lifespan: el scheduler no arranca.
    """
    from app.main import app as fastapi_app
    from app.modules.downloads.routes import get_download_service
    from app.modules.downloads.services import DownloadService
    from app.modules.payments.providers import get_payment_gateway
    from app.shared.database import get_async_session

    async def _override_session():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_async_session] = _override_session
    fastapi_app.dependency_overrides[get_payment_gateway] = lambda: gateway
    fastapi_app.dependency_overrides[get_download_service] = lambda: DownloadService(storage=storage)
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


# -----------------------------------------------------------------------------
# 4) Identidades
# -----------------------------------------------------------------------------
@pytest.fixture
def customer_id() -> UUID:
    return uuid4()


@pytest.fixture
def customer_headers(customer_id) -> Dict[str, str]:
    return bearer(customer_id)


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return bearer(uuid4(), role=ROLE_ADMIN)
