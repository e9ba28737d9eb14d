# -*- coding: utf-8 -*-
"""
backend/app/modules/checkout/services/__init__.py
"""

from .checkout_service import CheckoutService, CheckoutStart, checkout_totals

__all__ = ["CheckoutService", "CheckoutStart", "checkout_totals"]
