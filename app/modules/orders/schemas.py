# -*- coding: utf-8 -*-
"""
backend/app/modules/orders/schemas.py

Esquemas Pydantic de órdenes.

Autor: Anne Creations
Fecha: 2026-03-07
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class OrderHistoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order_status: str
    comment: str
    notify: bool
    created_at: datetime


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_number: int
    order_status: str
    products: List[Dict[str, Any]]
    totals: List[Dict[str, Any]]
    order_total: Decimal
    currency: str
    coupon_code: Optional[str] = None
    payment_method: str
    billing_address: Optional[Dict[str, Any]] = None
    paid_at: Optional[datetime] = None
    created_at: datetime


class OrderDetailOut(OrderOut):
    history: List[OrderHistoryOut] = Field(default_factory=list)


class OrderListResponse(BaseModel):
    items: List[OrderOut]
    total: int
    offset: int
    limit: int


class UpdateOrderStatusRequest(BaseModel):
    status: str = Field(min_length=1, max_length=32)
    comment: str = Field(default="", max_length=1000)
    notify: bool = False


class UpdateOrderStatusResponse(BaseModel):
    order: OrderOut
    changed: bool


class OrderStatusesResponse(BaseModel):
    statuses: List[str]
    transitions: Dict[str, List[str]]


__all__ = [
    "OrderDetailOut",
    "OrderHistoryOut",
    "OrderListResponse",
    "OrderOut",
    "OrderStatusesResponse",
    "UpdateOrderStatusRequest",
    "UpdateOrderStatusResponse",
]
