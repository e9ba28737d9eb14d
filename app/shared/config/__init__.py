# -*- coding: utf-8 -*-
"""
backend/app/shared/config/__init__.py

Punto único de acceso a la configuración:
    from app.shared.config import settings

El objeto `settings` es un proxy perezoso sobre config_loader.get_settings():
no instancia nada al importar (evita validaciones prematuras en tests) y
siempre refleja la instancia vigente tras get_settings.cache_clear().
"""

from __future__ import annotations

from typing import Any

from .config_loader import get_settings
from .settings_payments import PaymentsSettings, get_payments_settings


class _SettingsProxy:
    __slots__ = ()

    def __getattr__(self, name: str) -> Any:
        return getattr(get_settings(), name)

    def __repr__(self) -> str:
        return f"<settings proxy env={get_settings().python_env}>"


settings = _SettingsProxy()

__all__ = ["settings", "get_settings", "PaymentsSettings", "get_payments_settings"]
# Fin del archivo
