# -*- coding: utf-8 -*-
"""
backend/app/modules/checkout/schemas.py

Esquemas Pydantic del checkout.

Autor: Anne Creations
Fecha: 2026-03-05
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class BillingAddress(BaseModel):
    firstname: str = Field(min_length=1, max_length=64)
    lastname: str = Field(default="", max_length=64)
    email: str = Field(min_length=3, max_length=128)
    telephone: Optional[str] = Field(default=None, max_length=32)
    address_1: Optional[str] = Field(default=None, max_length=128)
    city: Optional[str] = Field(default=None, max_length=128)
    postcode: Optional[str] = Field(default=None, max_length=16)
    country: Optional[str] = Field(default=None, max_length=64)


class StartCheckoutRequest(BaseModel):
    billing_address: Optional[BillingAddress] = None


class AutoApplyOut(BaseModel):
    applied: bool
    reason: str
    coupon_code: Optional[str] = None
    coupon_name: Optional[str] = None
    discount_amount: Decimal = Decimal("0.00")
    final_amount: Optional[Decimal] = None
    amount_needed: Optional[Decimal] = None


class CheckoutResponse(BaseModel):
    checkout_id: UUID
    status: str
    line_items: List[Dict[str, Any]]
    billing_address: Optional[Dict[str, Any]] = None
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    coupon_code: Optional[str] = None
    coupon_source: Optional[str] = None
    expires_at: datetime
    seconds_remaining: int
    auto_apply: Optional[AutoApplyOut] = None


class ExpireCheckoutsResponse(BaseModel):
    expired: int


__all__ = [
    "AutoApplyOut",
    "BillingAddress",
    "CheckoutResponse",
    "ExpireCheckoutsResponse",
    "StartCheckoutRequest",
]
