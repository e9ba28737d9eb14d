# -*- coding: utf-8 -*-
"""
backend/app/modules/coupons/services/__init__.py
"""

from .admin_service import CouponAdminService
from .coupon_engine import AppliedCoupon, AutoApplyResult, CouponEngine
from .discount import DiscountResult, compute_discount, format_discount

__all__ = [
    "AppliedCoupon",
    "AutoApplyResult",
    "CouponAdminService",
    "CouponEngine",
    "DiscountResult",
    "compute_discount",
    "format_discount",
]
