# -*- coding: utf-8 -*-
"""
backend/app/modules/orders/enums/order_status_transitions.py

Mapa de transiciones válidas para OrderStatus.

Reglas de transición:
- pending    → authorized | paid | failed | cancelled
- authorized → paid | failed
- paid       → refunded
- failed, cancelled, refunded → (terminales)

Autor: Anne Creations
Fecha: 2026-03-07
"""

from typing import Dict, FrozenSet, Set

from app.shared.errors import IllegalTransitionError

from .order_status_enum import OrderStatus


VALID_ORDER_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({
        OrderStatus.AUTHORIZED,
        OrderStatus.PAID,
        OrderStatus.FAILED,
        OrderStatus.CANCELLED,
    }),
    OrderStatus.AUTHORIZED: frozenset({
        OrderStatus.PAID,
        OrderStatus.FAILED,
    }),
    OrderStatus.PAID: frozenset({
        OrderStatus.REFUNDED,
    }),
    OrderStatus.FAILED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.REFUNDED: frozenset(),
}

TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset(
    status for status, targets in VALID_ORDER_TRANSITIONS.items() if not targets
)


def is_valid_transition(from_status: OrderStatus, to_status: OrderStatus) -> bool:
    return to_status in VALID_ORDER_TRANSITIONS.get(from_status, frozenset())


def get_allowed_transitions(from_status: OrderStatus) -> FrozenSet[OrderStatus]:
    return VALID_ORDER_TRANSITIONS.get(from_status, frozenset())


def sources_for(to_status: OrderStatus) -> Set[OrderStatus]:
    """Estados desde los que se puede llegar a `to_status`."""
    return {src for src, targets in VALID_ORDER_TRANSITIONS.items() if to_status in targets}


def validate_transition(from_status: OrderStatus, to_status: OrderStatus) -> None:
    """
    Valida una transición de estado.

    Raises:
        IllegalTransitionError: Si la transición no está en la tabla.
    """
    if not is_valid_transition(from_status, to_status):
        allowed = get_allowed_transitions(from_status)
        allowed_str = ", ".join(sorted(s.value for s in allowed)) if allowed else "none"
        raise IllegalTransitionError(
            from_status.value,
            to_status.value,
            f"Illegal order status transition: '{from_status.value}' -> '{to_status.value}'. "
            f"Allowed from '{from_status.value}': {allowed_str}",
        )


__all__ = [
    "TERMINAL_STATUSES",
    "VALID_ORDER_TRANSITIONS",
    "get_allowed_transitions",
    "is_valid_transition",
    "sources_for",
    "validate_transition",
]

# Fin del archivo backend/app/modules/orders/enums/order_status_transitions.py
