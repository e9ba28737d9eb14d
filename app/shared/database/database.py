# -*- coding: utf-8 -*-
"""
backend/app/shared/database/database.py

SQLAlchemy async sobre asyncpg (PostgreSQL) o aiosqlite (pruebas locales).

Provee:
- engine (create_async_engine)
- SessionLocal (async_sessionmaker)
- Dependencia FastAPI: get_async_session
- context manager: session_scope()
- check_database_health()

Notas:
- NullPool en PostgreSQL; el pooling lo hace PgBouncer en despliegue.
- SQLite en memoria usa StaticPool para compartir la misma conexión.

Autor: Anne Creations
Fecha: 2026-03-02
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from app.shared.config import settings

logger = logging.getLogger(__name__)


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Crea el engine async adecuado al driver de la URL."""
    if url.startswith("sqlite"):
        return create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    connect_args: Dict[str, Any] = {
        "command_timeout": float(settings.db_command_timeout_s),
        # PgBouncer en transaction mode no soporta prepared statements cacheados
        "statement_cache_size": 0,
    }
    if settings.db_sslmode == "require":
        connect_args["ssl"] = "require"
    elif settings.db_sslmode == "disable":
        connect_args["ssl"] = False

    return create_async_engine(
        url,
        echo=echo,
        poolclass=NullPool,
        connect_args=connect_args,
    )


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.database_url, echo=bool(settings.db_echo_sql))
SessionLocal = build_sessionmaker(engine)

logger.debug("[DB] engine listo dialect=%s", engine.dialect.name)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependencia FastAPI: sesión por request.
    Hace rollback ante excepción; el commit es responsabilidad del servicio.
    """
    async with SessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def session_scope(factory: async_sessionmaker[AsyncSession] | None = None):
    """
    Context manager transaccional para jobs y scripts:

        async with session_scope() as session:
            ...
    """
    maker = factory or SessionLocal
    async with maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def check_database_health() -> bool:
    """Ejecuta SELECT 1; devuelve False (y loguea) si la BD no responde."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error("[DB] health check falló: %s", e)
        return False


__all__ = [
    "build_engine",
    "build_sessionmaker",
    "engine",
    "SessionLocal",
    "get_async_session",
    "session_scope",
    "check_database_health",
]

# Fin del archivo backend/app/shared/database/database.py
