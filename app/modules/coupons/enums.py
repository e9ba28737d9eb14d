# -*- coding: utf-8 -*-
"""
backend/app/modules/coupons/enums.py

Enumeraciones del módulo de cupones.

Autor: Anne Creations
Fecha: 2026-03-05
"""

from enum import Enum


class CouponType(str, Enum):
    """Tipo de descuento (códigos heredados del panel: F / P)."""
    FIXED = "F"
    PERCENTAGE = "P"


class IneligibleKind(str, Enum):
    """Motivo por el que un cupón manual no puede aplicarse."""
    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    NOT_STARTED = "not_started"
    EXPIRED = "expired"
    BELOW_MINIMUM = "below_minimum"
    USAGE_LIMIT_REACHED = "usage_limit_reached"
    CUSTOMER_LIMIT_REACHED = "customer_limit_reached"


__all__ = ["CouponType", "IneligibleKind"]
