# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_testing.py

Overrides para entorno de PRUEBAS (test) usando Pydantic v2.
Busca ser determinista y seguro: logging moderado, base de datos en
memoria, sin scheduler y secretos dummy para firmas.

Autor: Anne Creations
Fecha: 2026-03-02
"""

from typing import Optional

from pydantic import SecretStr
from .settings_base import BaseAppSettings
from pydantic_settings import SettingsConfigDict


class EnvTestingSettings(BaseAppSettings):
    # --- Identidad de entorno ---
    python_env: str = "test"

    # --- Logging en test: menos ruido ---
    log_level: str = "WARNING"
    log_format: str = "pretty"

    # --- Base de datos: SQLite en memoria salvo que se indique otra ---
    db_url: Optional[str] = "sqlite+aiosqlite:///:memory:"
    db_sslmode: str = "disable"

    # --- Secretos dummy (≥32 caracteres) ---
    jwt_secret_key: SecretStr = SecretStr("test-jwt-secret-for-the-suite-0123456789")
    download_token_secret: Optional[SecretStr] = SecretStr("test-download-secret-0123456789abcdef")

    # --- El barrido de checkouts se dispara a mano en pruebas ---
    checkout_sweep_enabled: bool = False
    http_metrics_enabled: bool = False

    model_config = SettingsConfigDict(
        env_file=".env.test",
        env_file_encoding="utf-8",
        extra="ignore",
    )


__all__ = ["EnvTestingSettings"]
# Fin del archivo backend/app/shared/config/settings_testing.py
