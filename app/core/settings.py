# -*- coding: utf-8 -*-
"""
backend/app/core/settings.py

Fachada de configuración.
Reexpone la carga de settings basada en Pydantic v2 definida en
`app.shared.config` junto con la configuración de pagos.

Autor: Anne Creations
Fecha: 2026-03-02
"""

from typing import cast

from app.shared.config.config_loader import get_settings as _get_settings
from app.shared.config.settings_base import BaseAppSettings
from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings


def get_settings() -> BaseAppSettings:
    """
    Devuelve la configuración global de la aplicación (según PYTHON_ENV).
    """
    return cast(BaseAppSettings, _get_settings())


__all__ = ["get_settings", "get_payments_settings", "PaymentsSettings"]

# Fin del archivo backend/app/core/settings.py
