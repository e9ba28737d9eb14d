# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/__init__.py

Superficie de exportación de servicios del módulo Payments.
"""

from .payment_service import ALREADY_PURCHASED_MESSAGE, PaymentOrderResult, PaymentService
from .reconciliation import PaidOutcome, mark_order_paid

__all__ = [
    "ALREADY_PURCHASED_MESSAGE",
    "PaidOutcome",
    "PaymentOrderResult",
    "PaymentService",
    "mark_order_paid",
]

# Fin del archivo backend/app/modules/payments/services/__init__.py
