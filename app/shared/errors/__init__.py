# -*- coding: utf-8 -*-
"""
backend/app/shared/errors/__init__.py

Taxonomía de errores de dominio y su registro en FastAPI.
"""

from .commerce_errors import (
    AuthorizationFailure,
    CommerceError,
    ConflictError,
    IllegalTransitionError,
    IneligibleCouponError,
    NotFoundError,
    PaymentGatewayError,
    SignatureMismatchError,
    StorageMissingError,
    ValidationError,
)
from .handlers import register_exception_handlers

__all__ = [
    "AuthorizationFailure",
    "CommerceError",
    "ConflictError",
    "IllegalTransitionError",
    "IneligibleCouponError",
    "NotFoundError",
    "PaymentGatewayError",
    "SignatureMismatchError",
    "StorageMissingError",
    "ValidationError",
    "register_exception_handlers",
]
