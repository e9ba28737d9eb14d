# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/webhooks/__init__.py

Webhooks de proveedores de pago.
"""

from .razorpay_handler import CAPTURE_EVENTS, handle_razorpay_webhook

__all__ = ["CAPTURE_EVENTS", "handle_razorpay_webhook"]
