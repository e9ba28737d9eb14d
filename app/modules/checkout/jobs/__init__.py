# -*- coding: utf-8 -*-
"""
backend/app/modules/checkout/jobs/__init__.py

Jobs programados del módulo checkout.
"""

from .expire_checkouts_job import (
    EXPIRE_CHECKOUTS_JOB_ID,
    cleanup_expired,
    register_checkout_sweep_job,
)

__all__ = ["EXPIRE_CHECKOUTS_JOB_ID", "cleanup_expired", "register_checkout_sweep_job"]
