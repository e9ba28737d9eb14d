# -*- coding: utf-8 -*-
"""
backend/app/modules/checkout/__init__.py

Staging entre carrito y orden: snapshot de precios con TTL.
Los servicios se importan desde app.modules.checkout.services.
"""

from .models import Checkout, CheckoutStatus, CouponSource

__all__ = ["Checkout", "CheckoutStatus", "CouponSource"]
