# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/schemas/razorpay_schemas.py

Esquemas Pydantic del flujo de pago con Razorpay.

Autor: Anne Creations
Fecha: 2026-03-08
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class CreatePaymentOrderRequest(BaseModel):
    checkout_id: UUID


class CreatePaymentOrderResponse(BaseModel):
    order_id: UUID
    order_number: int
    order_status: str
    payment_required: bool
    gateway_order_id: Optional[str] = None
    amount: Decimal
    currency: str
    key_id: Optional[str] = None
    message: Optional[str] = None


class VerifyPaymentRequest(BaseModel):
    order_id: UUID
    razorpay_order_id: str = Field(min_length=1, max_length=64)
    razorpay_payment_id: str = Field(min_length=1, max_length=64)
    razorpay_signature: str = Field(min_length=1, max_length=256)


class VerifyPaymentResponse(BaseModel):
    order_id: UUID
    order_number: int
    order_status: str
    already_processed: bool


class PaymentFailureRequest(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=500)


class PaymentFailureResponse(BaseModel):
    order_id: UUID
    order_status: str
    changed: bool


__all__ = [
    "CreatePaymentOrderRequest",
    "CreatePaymentOrderResponse",
    "PaymentFailureRequest",
    "PaymentFailureResponse",
    "VerifyPaymentRequest",
    "VerifyPaymentResponse",
]
