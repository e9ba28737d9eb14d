# -*- coding: utf-8 -*-
"""
backend/app/modules/coupons/services/discount.py

Cálculo puro del descuento de un cupón (sin I/O).

Reglas:
- Fijo (F):       discount = min(valor, subtotal)
- Porcentaje (P): discount = subtotal * valor / 100
- max_discount > 0 limita el descuento en ambos tipos
- final = max(0, subtotal - discount)

Garantía: 0 <= discount_amount <= subtotal y
final_amount == subtotal - discount_amount.

Autor: Anne Creations
Fecha: 2026-03-05
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from app.shared.database.types import to_money

from ..enums import CouponType

Number = Union[Decimal, int, str]
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class DiscountResult:
    subtotal: Decimal
    discount_amount: Decimal
    final_amount: Decimal


def compute_discount(
    coupon_type: Union[CouponType, str],
    discount: Number,
    subtotal: Number,
    max_discount: Number = 0,
) -> DiscountResult:
    """
    Calcula el descuento de un cupón sobre un subtotal.

    Ejemplos:
        >>> compute_discount("F", 150, 1000).final_amount
        Decimal('850.00')
        >>> compute_discount("P", 20, 1000, max_discount=150).discount_amount
        Decimal('150.00')
    """
    ctype = CouponType(coupon_type)
    subtotal_d = max(to_money(subtotal), ZERO)
    value = max(to_money(discount), ZERO)
    cap = to_money(max_discount)

    if ctype is CouponType.PERCENTAGE:
        raw = subtotal_d * value / Decimal(100)
    else:
        raw = value

    if cap > ZERO:
        raw = min(raw, cap)

    amount = min(to_money(raw), subtotal_d)
    return DiscountResult(
        subtotal=subtotal_d,
        discount_amount=amount,
        final_amount=to_money(subtotal_d - amount),
    )


def format_discount(coupon_type: Union[CouponType, str], discount: Number) -> str:
    """'20%' para porcentaje, '₹150' para fijo (sin ceros decimales sobrantes)."""
    value = to_money(discount)
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if CouponType(coupon_type) is CouponType.PERCENTAGE:
        return f"{text}%"
    return f"₹{text}"


__all__ = ["DiscountResult", "compute_discount", "format_discount"]
