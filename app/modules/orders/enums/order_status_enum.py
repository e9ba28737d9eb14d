# -*- coding: utf-8 -*-
"""
backend/app/modules/orders/enums/order_status_enum.py

Enum de estados de la orden.

Autor: Anne Creations
Fecha: 2026-03-07
"""

from enum import StrEnum


class OrderStatus(StrEnum):
    """Estado de la orden en su ciclo de vida de pago."""

    PENDING = "pending"
    AUTHORIZED = "authorized"
    PAID = "paid"
    FAILED = "failed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


__all__ = ["OrderStatus"]

# Fin del archivo backend/app/modules/orders/enums/order_status_enum.py
