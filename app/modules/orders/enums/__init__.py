# -*- coding: utf-8 -*-
"""
backend/app/modules/orders/enums/__init__.py
"""

from .order_status_enum import OrderStatus
from .order_status_transitions import (
    TERMINAL_STATUSES,
    VALID_ORDER_TRANSITIONS,
    get_allowed_transitions,
    is_valid_transition,
    sources_for,
    validate_transition,
)

__all__ = [
    "OrderStatus",
    "TERMINAL_STATUSES",
    "VALID_ORDER_TRANSITIONS",
    "get_allowed_transitions",
    "is_valid_transition",
    "sources_for",
    "validate_transition",
]
