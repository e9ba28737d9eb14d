# -*- coding: utf-8 -*-
"""
backend/app/core/__init__.py

Fachada unificada para componentes centrales del backend:
- Configuración (settings)
- Logging
- Motor de base de datos y sesiones

Autor: Anne Creations
Fecha: 2026-03-02
"""

from .settings import get_settings, get_payments_settings
from .logging import setup_logging

__all__ = [
    "get_settings",
    "get_payments_settings",
    "setup_logging",
]

# Fin del archivo backend/app/core/__init__.py
