# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/__init__.py

Pagos con Razorpay: orden en el gateway, verificación de firma,
webhooks y reconciliación a 'paid'.

Estructura:
- providers: cliente del gateway (httpx)
- signatures: HMAC de pago y de webhook
- services: PaymentService y mark_order_paid
- webhooks: handler de eventos Razorpay
- routes: API REST
"""
