# -*- coding: utf-8 -*-
"""
backend/app/modules/auth/__init__.py

Superficie de autenticación consumida por los módulos de comercio.
"""

from .dependencies import get_current_claims, get_current_customer_id, require_admin
from .security import ROLE_ADMIN, ROLE_CUSTOMER, create_access_token, decode_access_token

__all__ = [
    "ROLE_ADMIN",
    "ROLE_CUSTOMER",
    "create_access_token",
    "decode_access_token",
    "get_current_claims",
    "get_current_customer_id",
    "require_admin",
]
