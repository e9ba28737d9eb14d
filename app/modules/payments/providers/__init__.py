# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/providers/__init__.py

Proveedores de gateway de pago.
"""

from .razorpay_provider import GatewayOrder, PaymentGateway, RazorpayGateway, get_payment_gateway

__all__ = ["GatewayOrder", "PaymentGateway", "RazorpayGateway", "get_payment_gateway"]
