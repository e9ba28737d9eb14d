# -*- coding: utf-8 -*-
"""
backend/app/core/db.py

Fachada para la capa de acceso a datos basada en SQLAlchemy async.
Envuelve `app.shared.database` para exponer:

- engine / SessionLocal
- Base
- get_async_session
- session_scope()

Autor: Anne Creations
Fecha: 2026-03-02
"""

from app.shared.database import (
    Base,
    SessionLocal,
    check_database_health,
    engine,
    get_async_session,
    session_scope,
)

__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "get_async_session",
    "session_scope",
    "check_database_health",
]

# Fin del archivo backend/app/core/db.py
