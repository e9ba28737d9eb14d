# -*- coding: utf-8 -*-
"""
backend/app/modules/orders/services/__init__.py
"""

from .order_service import OrderService, TransitionResult, build_totals, parse_order_status

__all__ = ["OrderService", "TransitionResult", "build_totals", "parse_order_status"]
