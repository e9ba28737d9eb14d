# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/signatures.py

Firmas HMAC-SHA256 de Razorpay.

- Pago (checkout del cliente): hex(HMAC(key_secret, "order_id|payment_id"))
- Webhook: hex(HMAC(webhook_secret, raw_body)) en X-Razorpay-Signature

La comparación es siempre en tiempo constante.

Autor: Anne Creations
Fecha: 2026-03-08
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Optional

logger = logging.getLogger(__name__)


def _hmac_hex(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), msg=message, digestmod=hashlib.sha256).hexdigest()


def compute_payment_signature(gateway_order_id: str, gateway_payment_id: str, key_secret: str) -> str:
    return _hmac_hex(key_secret, f"{gateway_order_id}|{gateway_payment_id}".encode("utf-8"))


def verify_payment_signature(
    gateway_order_id: str,
    gateway_payment_id: str,
    signature: Optional[str],
    key_secret: Optional[str],
) -> bool:
    if not signature or not key_secret:
        return False
    expected = compute_payment_signature(gateway_order_id, gateway_payment_id, key_secret)
    return hmac.compare_digest(expected, signature.strip())


def compute_webhook_signature(raw_body: bytes, webhook_secret: str) -> str:
    return _hmac_hex(webhook_secret, raw_body)


def verify_webhook_signature(
    raw_body: bytes,
    signature_header: Optional[str],
    webhook_secret: Optional[str],
) -> bool:
    if not signature_header:
        logger.warning("Razorpay webhook rechazado: falta header X-Razorpay-Signature")
        return False
    if not webhook_secret:
        logger.error("Razorpay webhook rechazado: RAZORPAY_WEBHOOK_SECRET no configurado")
        return False
    expected = compute_webhook_signature(raw_body, webhook_secret)
    return hmac.compare_digest(expected, signature_header.strip())


__all__ = [
    "compute_payment_signature",
    "compute_webhook_signature",
    "verify_payment_signature",
    "verify_webhook_signature",
]
