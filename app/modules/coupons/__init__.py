# -*- coding: utf-8 -*-
"""
backend/app/modules/coupons/__init__.py

Cupones de descuento y ledger de uso.
"""

from .enums import CouponType, IneligibleKind
from .models import Coupon, CouponUsage

__all__ = ["Coupon", "CouponType", "CouponUsage", "IneligibleKind"]
