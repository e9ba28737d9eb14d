# -*- coding: utf-8 -*-
"""
backend/app/shared/database/__init__.py

Re-exporta utilidades comunes de base de datos.

Autor: Anne Creations
Fecha: 2026-03-02
"""

from __future__ import annotations

from .base import Base, NAMING_CONVENTION, TimestampMixin
from .database import (
    SessionLocal,
    build_engine,
    build_sessionmaker,
    check_database_health,
    engine,
    get_async_session,
    session_scope,
)

__all__ = [
    "Base",
    "NAMING_CONVENTION",
    "TimestampMixin",
    "SessionLocal",
    "build_engine",
    "build_sessionmaker",
    "check_database_health",
    "engine",
    "get_async_session",
    "session_scope",
]

# Fin del archivo backend/app/shared/database/__init__.py
