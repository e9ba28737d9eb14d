# -*- coding: utf-8 -*-
"""
backend/app/modules/cart/schemas.py

Esquemas Pydantic del carrito.

Autor: Anne Creations
Fecha: 2026-03-04
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class AddCartItemRequest(BaseModel):
    product_id: UUID
    option_ids: List[UUID] = Field(min_length=1, description="Opciones seleccionadas del producto.")


class CartOptionOut(BaseModel):
    option_id: UUID
    name: str
    price: Decimal


class CartLineOut(BaseModel):
    item_id: UUID
    product_id: UUID
    product_name: Optional[str] = None
    available: bool
    options: List[CartOptionOut] = Field(default_factory=list)
    subtotal: Decimal


class CartResponse(BaseModel):
    cart_id: UUID
    items: List[CartLineOut]
    item_count: int
    subtotal: Decimal
    has_unavailable: bool


__all__ = ["AddCartItemRequest", "CartLineOut", "CartOptionOut", "CartResponse"]
