# -*- coding: utf-8 -*-
"""
backend/app/shared/database/types.py

Tipos de columna portables entre PostgreSQL y SQLite.

- TZDateTime: datetime siempre aware en UTC (SQLite devuelve naive).
- Money: Decimal con 2 decimales persistido como entero de centésimas
  (paise para INR), sin errores de coma flotante en ningún motor.
- JSONType: JSONB en PostgreSQL, JSON genérico en el resto.

Autor: Anne Creations
Fecha: 2026-03-02
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from sqlalchemy import JSON, BigInteger, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import TypeDecorator

TWO_PLACES = Decimal("0.01")

JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_money(value: Any) -> Decimal:
    """Normaliza un valor numérico a Decimal con 2 decimales (ROUND_HALF_UP)."""
    if isinstance(value, Decimal):
        dec = value
    elif isinstance(value, float):
        dec = Decimal(str(value))
    else:
        dec = Decimal(value)
    return dec.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def to_paise(value: Any) -> int:
    """Convierte un monto en rupias a entero de paise (unidad del gateway)."""
    return int(to_money(value) * 100)


def from_paise(value: int) -> Decimal:
    return to_money(Decimal(int(value)) / 100)


class TZDateTime(TypeDecorator):
    """DateTime con zona horaria; normaliza a UTC al guardar y al leer."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Money(TypeDecorator):
    """Decimal(.., 2) almacenado como BIGINT de centésimas."""

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value: Any, dialect) -> Optional[int]:
        if value is None:
            return None
        return to_paise(value)

    def process_result_value(self, value: Optional[int], dialect) -> Optional[Decimal]:
        if value is None:
            return None
        return from_paise(value)


__all__ = [
    "JSONType",
    "Money",
    "TZDateTime",
    "TWO_PLACES",
    "from_paise",
    "to_money",
    "to_paise",
    "utcnow",
]

# Fin del archivo backend/app/shared/database/types.py
