# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/__init__.py

Ensamblador de rutas del módulo Payments.

Incluye:
- /payments/orders
- /payments/verify
- /payments/{order_id}/failure
- /payments/webhooks/razorpay

Autor: Anne Creations
Fecha: 2026-03-08
"""

from fastapi import APIRouter

from .payment_routes import router as payment_router
from .webhook_routes import router as webhook_router

router = APIRouter()

# Prefijo común /payments para todas las rutas del módulo
router.include_router(webhook_router, prefix="/payments")
router.include_router(payment_router, prefix="/payments")

__all__ = ["router"]

# Fin del archivo backend/app/modules/payments/routes/__init__.py
