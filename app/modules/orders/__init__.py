# -*- coding: utf-8 -*-
"""
backend/app/modules/orders/__init__.py

Órdenes: snapshot de compra, máquina de estados e historial.
"""

from .enums import OrderStatus
from .models import Counter, Order, OrderHistory

__all__ = ["Counter", "Order", "OrderHistory", "OrderStatus"]
