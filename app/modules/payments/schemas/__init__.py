# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/schemas/__init__.py
"""

from .razorpay_schemas import (
    CreatePaymentOrderRequest,
    CreatePaymentOrderResponse,
    PaymentFailureRequest,
    PaymentFailureResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)

__all__ = [
    "CreatePaymentOrderRequest",
    "CreatePaymentOrderResponse",
    "PaymentFailureRequest",
    "PaymentFailureResponse",
    "VerifyPaymentRequest",
    "VerifyPaymentResponse",
]
