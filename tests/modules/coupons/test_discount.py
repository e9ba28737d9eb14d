# -*- coding: utf-8 -*-
"""
backend/tests/modules/coupons/test_discount.py

Cálculo de descuentos (fijo / porcentaje / tope / clamp al subtotal).

Autor: Anne Creations
Fecha: 2026-03-10
"""

from decimal import Decimal

import pytest

from app.modules.coupons.enums import CouponType
from app.modules.coupons.services import compute_discount, format_discount


def test_fixed_discount_on_1000_subtotal():
    result = compute_discount(CouponType.FIXED, 150, 1000)
    assert result.discount_amount == Decimal("150.00")
    assert result.final_amount == Decimal("850.00")


def test_percentage_discount_clamped_by_max_discount():
    result = compute_discount(CouponType.PERCENTAGE, 20, 1000, max_discount=150)
    assert result.discount_amount == Decimal("150.00")
    assert result.final_amount == Decimal("850.00")


def test_percentage_without_cap_uses_raw_value():
    result = compute_discount("P", 20, 1000)
    assert result.discount_amount == Decimal("200.00")
    assert result.final_amount == Decimal("800.00")


def test_fixed_discount_never_exceeds_subtotal():
    result = compute_discount("F", 500, 300)
    assert result.discount_amount == Decimal("300.00")
    assert result.final_amount == Decimal("0.00")


def test_percentage_rounds_half_up_to_paise():
    result = compute_discount("P", Decimal("12.5"), Decimal("99.99"))
    # 12.4987... → 12.50
    assert result.discount_amount == Decimal("12.50")
    assert result.final_amount == Decimal("87.49")


@pytest.mark.parametrize(
    "ctype, value, subtotal, cap",
    [
        ("F", 0, 1000, 0),
        ("F", 2000, 1000, 0),
        ("P", 100, 750, 0),
        ("P", 35, 1234.56, 100),
        ("F", 10, 0, 0),
    ],
)
def test_discount_bounds_and_final_amount(ctype, value, subtotal, cap):
    result = compute_discount(ctype, value, subtotal, max_discount=cap)
    assert Decimal("0") <= result.discount_amount <= result.subtotal
    assert result.final_amount == result.subtotal - result.discount_amount


def test_format_discount():
    assert format_discount("P", 20) == "20%"
    assert format_discount("F", Decimal("150.00")) == "₹150"
    assert format_discount("F", Decimal("99.50")) == "₹99.5"
