# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_payments.py

Configuración de pagos para Anne Creations.

Descripción:
    Centraliza credenciales de Razorpay, moneda, timeouts del gateway
    y feature flags del flujo de pago.

Autor: Anne Creations
Fecha: 2026-03-02
"""

from __future__ import annotations

import os
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaymentsSettings(BaseSettings):
    """Configuración de sistema de pagos."""

    # =========================================================================
    # FEATURE FLAGS
    # =========================================================================

    payments_enabled: bool = Field(
        default=True,
        description="Habilita el sistema de pagos globalmente"
    )

    # =========================================================================
    # RAZORPAY
    # =========================================================================

    razorpay_key_id: Optional[str] = Field(
        default=None,
        description="Razorpay key id (rzp_live_... o rzp_test_...)"
    )

    razorpay_key_secret: Optional[str] = Field(
        default=None,
        description="Razorpay key secret; firma de pagos order_id|payment_id"
    )

    razorpay_webhook_secret: Optional[str] = Field(
        default=None,
        validate_default=True,
        description="Secreto de firma de webhooks (X-Razorpay-Signature)"
    )

    razorpay_api_base_url: str = Field(
        default="https://api.razorpay.com/v1",
        description="URL base de la API de Razorpay"
    )

    @field_validator("razorpay_webhook_secret", mode="before")
    @classmethod
    def _load_webhook_secret(cls, v: Optional[str]) -> Optional[str]:
        """Fallback a RAZORPAY_KEY_SECRET si no hay secreto dedicado de webhooks."""
        if v:
            return v
        return os.getenv("RAZORPAY_KEY_SECRET")

    # =========================================================================
    # MONEDA Y LÍMITES
    # =========================================================================

    payments_currency: str = Field(
        default="INR",
        description="Moneda de las órdenes creadas en el gateway"
    )

    amount_tolerance_paise: int = Field(
        default=1,
        description="Tolerancia al comparar el monto capturado contra el total de la orden"
    )

    # =========================================================================
    # TIMEOUTS
    # =========================================================================

    gateway_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout total de la llamada de creación de orden en el gateway"
    )

    gateway_connect_timeout_seconds: float = Field(
        default=5.0,
        description="Timeout de conexión contra el gateway"
    )

    # =========================================================================
    # CONFIGURACIÓN DE PYDANTIC
    # =========================================================================

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.razorpay_key_id and self.razorpay_key_secret)


# Singleton global
_payments_settings: Optional[PaymentsSettings] = None


def get_payments_settings() -> PaymentsSettings:
    """
    Obtiene la instancia global de configuración de pagos.

    Returns:
        PaymentsSettings: Configuración de pagos
    """
    global _payments_settings
    if _payments_settings is None:
        _payments_settings = PaymentsSettings()
    return _payments_settings


def reset_payments_settings() -> None:
    """Descarta la instancia cacheada (usado al recargar entorno en pruebas)."""
    global _payments_settings
    _payments_settings = None


__all__ = [
    "PaymentsSettings",
    "get_payments_settings",
    "reset_payments_settings",
]
# Fin del archivo backend/app/shared/config/settings_payments.py
