# -*- coding: utf-8 -*-
"""
backend/app/modules/orders/services/order_service.py

Máquina de estados de la orden y vistas de cliente.

Reglas de dominio:
1. Toda transición se valida contra VALID_ORDER_TRANSITIONS.
2. La escritura es compare-and-set; el ganador agrega exactamente una
   fila de historial. El perdedor observa el estado actual: si ya es el
   destino la llamada es un no-op, si no lanza IllegalTransitionError.
3. El paso a 'paid' desde administración pasa por la reconciliación de
   pagos para que el ledger de cupones quede escrito.

Transacciones: transition_order solo hace flush; los métodos públicos
de administración hacen commit.

Autor: Anne Creations
Fecha: 2026-03-07
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.checkout.models import Checkout
from app.shared.database.types import to_money
from app.shared.errors import IllegalTransitionError, NotFoundError, ValidationError

from ..enums import OrderStatus, sources_for, validate_transition
from ..models import Order, OrderHistory
from ..repository import OrderRepository

logger = logging.getLogger(__name__)


@dataclass
class TransitionResult:
    order: Order
    changed: bool


def parse_order_status(value: str) -> OrderStatus:
    """
    Convierte un estado recibido por API.

    Raises:
        ValidationError: estado desconocido (incluye 'processing').
    """
    try:
        return OrderStatus((value or "").strip().lower())
    except ValueError as e:
        raise ValidationError(
            f"Unknown order status: {value!r}",
            allowed=[s.value for s in OrderStatus],
        ) from e


def build_totals(subtotal: Decimal, discount: Decimal, total: Decimal) -> List[Dict[str, Any]]:
    """Líneas de totales de la orden; 'total' siempre es la última."""
    lines: List[Dict[str, Any]] = [
        {"code": "subtotal", "value": str(to_money(subtotal)), "sort_order": 1},
    ]
    if to_money(discount) > 0:
        lines.append({"code": "coupon_discount", "value": str(-to_money(discount)), "sort_order": 2})
    lines.append({"code": "total", "value": str(to_money(total)), "sort_order": len(lines) + 1})
    return lines


class OrderService:

    def __init__(self, repo: Optional[OrderRepository] = None):
        self.repo = repo or OrderRepository()

    # ------------------------------------------------------------------
    # Creación
    # ------------------------------------------------------------------
    async def create_from_checkout(
        self,
        session: AsyncSession,
        checkout: Checkout,
        currency: str = "INR",
    ) -> Order:
        """
        Inserta la orden pending de un checkout (flush, sin commit).

        El llamador maneja IntegrityError por checkout_id único.
        """
        number = await self.repo.next_order_number(session)
        order = Order(
            order_number=number,
            customer_id=checkout.customer_id,
            checkout_id=checkout.id,
            billing_address=checkout.billing_snapshot,
            products=list(checkout.line_items or []),
            totals=build_totals(checkout.subtotal_amount, checkout.discount_amount, checkout.total_amount),
            order_total=to_money(checkout.total_amount),
            currency=currency,
            order_status=OrderStatus.PENDING.value,
            coupon_id=checkout.coupon_id,
            coupon_code=checkout.coupon_code,
            discount_amount=to_money(checkout.discount_amount),
        )
        session.add(order)
        await session.flush()
        await self.repo.add_history(session, order.id, OrderStatus.PENDING, "Checkout initiated from cart")
        return order

    # ------------------------------------------------------------------
    # Transiciones
    # ------------------------------------------------------------------
    async def transition_order(
        self,
        session: AsyncSession,
        order_id: UUID,
        to_status: OrderStatus,
        comment: str = "",
        notify: bool = False,
        expected_from: Optional[Iterable[OrderStatus]] = None,
        **values: Any,
    ) -> TransitionResult:
        """
        Compare-and-set de order_status dentro de la transacción del llamador.

        Args:
            expected_from: restringe los estados de origen aceptados
                (intersección con la tabla de transiciones).
            **values: columnas adicionales a escribir junto con el estado.

        Raises:
            NotFoundError: la orden no existe.
            IllegalTransitionError: el estado actual no permite la transición.
        """
        sources = sources_for(to_status)
        if expected_from is not None:
            sources &= set(expected_from)

        won = await self.repo.compare_and_set_status(session, order_id, sources, to_status, **values)

        order = await self.repo.get_by_id(session, order_id)
        if order is None:
            raise NotFoundError("Order not found", order_id=str(order_id))
        await session.refresh(order)

        if won:
            await self.repo.add_history(session, order_id, to_status, comment, notify)
            logger.info(
                "order_transition order_id=%s number=%s to=%s",
                order_id,
                order.order_number,
                to_status.value,
            )
            return TransitionResult(order=order, changed=True)

        if order.order_status == to_status.value:
            logger.info("order_transition_noop order_id=%s status=%s", order_id, to_status.value)
            return TransitionResult(order=order, changed=False)

        raise IllegalTransitionError(order.order_status, to_status.value)

    async def update_order_status(
        self,
        session: AsyncSession,
        order_id: UUID,
        new_status: str,
        comment: str = "",
        notify: bool = False,
    ) -> TransitionResult:
        """
        Cambio de estado desde administración.

        Raises:
            ValidationError: estado desconocido.
            NotFoundError: la orden no existe.
            IllegalTransitionError: transición fuera de la tabla.
        """
        to_status = parse_order_status(new_status)
        order = await self.repo.get_by_id(session, order_id)
        if order is None:
            raise NotFoundError("Order not found", order_id=str(order_id))

        validate_transition(order.status, to_status)

        if to_status is OrderStatus.PAID:
            from app.modules.payments.services.reconciliation import mark_order_paid

            outcome = await mark_order_paid(
                session,
                order_id,
                gateway_payment_id=None,
                comment=comment or "Marked as paid by admin",
                notify=notify,
                source="admin",
            )
            return TransitionResult(order=outcome.order, changed=not outcome.already_processed)

        result = await self.transition_order(
            session,
            order_id,
            to_status,
            comment=comment or f"Status changed to {to_status.value}",
            notify=notify,
        )
        await session.commit()
        return result

    async def cancel_pending_for_checkouts(
        self,
        session: AsyncSession,
        checkout_ids: Iterable[UUID],
        comment: str = "Checkout cancelled",
    ) -> int:
        """
        pending → cancelled para las órdenes de checkouts que ya no pueden
        pagarse (flush, sin commit). Una orden que ya avanzó se deja como está.

        Returns:
            Número de órdenes canceladas.
        """
        cancelled = 0
        for order in await self.repo.list_pending_for_checkouts(session, checkout_ids):
            try:
                result = await self.transition_order(
                    session,
                    order.id,
                    OrderStatus.CANCELLED,
                    comment=comment,
                    expected_from={OrderStatus.PENDING},
                )
            except IllegalTransitionError as e:
                logger.info("order_cancel_skipped order_id=%s status=%s", order.id, e.from_status)
                continue
            cancelled += int(result.changed)
        return cancelled

    # ------------------------------------------------------------------
    # Vistas
    # ------------------------------------------------------------------
    async def get_order(self, session: AsyncSession, order_id: UUID) -> Order:
        order = await self.repo.get_by_id(session, order_id)
        if order is None:
            raise NotFoundError("Order not found", order_id=str(order_id))
        return order

    async def get_customer_order(self, session: AsyncSession, order_id: UUID, customer_id: UUID) -> Order:
        order = await self.repo.get_by_id(session, order_id)
        if order is None or order.customer_id != customer_id:
            raise NotFoundError("Order not found", order_id=str(order_id))
        return order

    async def list_customer_orders(
        self,
        session: AsyncSession,
        customer_id: UUID,
        status: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Order], int]:
        parsed = parse_order_status(status) if status else None
        return await self.repo.list_for_customer(
            session, customer_id, status=parsed, offset=offset, limit=limit
        )

    async def get_history(self, session: AsyncSession, order_id: UUID) -> List[OrderHistory]:
        return await self.repo.list_history(session, order_id)


__all__ = [
    "OrderService",
    "TransitionResult",
    "build_totals",
    "parse_order_status",
]
