# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/reconciliation.py

Transición a 'paid' y sus efectos secundarios.

Es el único punto donde una orden pasa a pagada, venga de la firma del
checkout, del webhook, de una orden gratuita o del panel admin.

Garantías:
- Compare-and-set pending|authorized → paid: solo un llamador gana.
- El ganador, en la misma transacción: historial, a lo sumo una fila de
  CouponUsage (re-chequeo de topes con el cupón bloqueado), checkout
  pending → paid y vaciado del carrito.
- El perdedor recibe already_processed=True sin efectos secundarios.

Autor: Anne Creations
Fecha: 2026-03-08
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.cart.services import CartService
from app.modules.checkout.services import CheckoutService
from app.modules.coupons.repository import CouponRepository, CouponUsageRepository
from app.modules.coupons.services import CouponEngine
from app.modules.orders.enums import OrderStatus
from app.modules.orders.models import Order
from app.modules.orders.services import OrderService
from app.observability.prom import ORDERS_PAID
from app.shared.database.types import utcnow

logger = logging.getLogger(__name__)


@dataclass
class PaidOutcome:
    order: Order
    already_processed: bool
    coupon_usage_recorded: bool = False


@dataclass
class _CouponVerdict:
    """Decisión sobre el ledger tomada con el cupón bloqueado."""
    coupon_id: Optional[UUID]
    note: str = ""


async def _check_coupon_usage(session: AsyncSession, order: Order) -> _CouponVerdict:
    coupons = CouponRepository()
    usages = CouponUsageRepository()

    coupon = await coupons.lock(session, order.coupon_id)
    if coupon is None:
        logger.warning("coupon_usage_skipped order_id=%s reason=coupon_deleted", order.id)
        return _CouponVerdict(coupon_id=None)

    violation = await CouponEngine(coupons=coupons, usages=usages).usage_cap_violation(
        session, coupon, order.customer_id
    )
    if violation is not None:
        # El pago ya ocurrió: la orden queda pagada, el uso no se registra
        logger.warning(
            "coupon_cap_exceeded_at_payment order_id=%s code=%s kind=%s",
            order.id,
            coupon.code,
            violation.value,
        )
        return _CouponVerdict(
            coupon_id=None,
            note=f"Coupon {coupon.code} usage not recorded: {violation.value}",
        )

    return _CouponVerdict(
        coupon_id=coupon.id,
        note=f"Coupon usage confirmed. Discount amount: {order.discount_amount:.2f} applied to final payment.",
    )


def _with_note(comment: str, note: str) -> str:
    if not note:
        return comment
    if not comment:
        return note
    return f"{comment.rstrip('.')}. {note}"


async def mark_order_paid(
    session: AsyncSession,
    order_id: UUID,
    gateway_payment_id: Optional[str] = None,
    comment: str = "Payment captured",
    notify: bool = True,
    source: str = "checkout",
    now: Optional[datetime] = None,
    **values: Any,
) -> PaidOutcome:
    """
    pending|authorized → paid con todos sus efectos, y commit.

    El veredicto del cupón se calcula antes del compare-and-set (con el
    cupón bloqueado) y viaja en el comentario de la única fila de
    historial de la transición.

    Args:
        values: columnas extra de la orden (payment_method, payment_code).

    Raises:
        NotFoundError: la orden no existe.
        IllegalTransitionError: la orden está en un estado terminal distinto de paid.
    """
    now = now or utcnow()
    orders = OrderService()

    current = await orders.get_order(session, order_id)
    verdict: Optional[_CouponVerdict] = None
    if current.coupon_id is not None and current.order_status != OrderStatus.PAID.value:
        verdict = await _check_coupon_usage(session, current)

    updates = dict(values)
    updates["paid_at"] = now
    if gateway_payment_id:
        updates["gateway_payment_id"] = gateway_payment_id

    result = await orders.transition_order(
        session,
        order_id,
        OrderStatus.PAID,
        comment=_with_note(comment, verdict.note if verdict else ""),
        notify=notify,
        **updates,
    )
    order = result.order

    if not result.changed:
        logger.info("order_already_paid order_id=%s source=%s", order_id, source)
        return PaidOutcome(order=order, already_processed=True)

    usage_recorded = False
    if verdict is not None and verdict.coupon_id is not None:
        _, usage_recorded = await CouponUsageRepository().record_usage(
            session,
            coupon_id=verdict.coupon_id,
            customer_id=order.customer_id,
            order_id=order.id,
            discount_amount=order.discount_amount,
            order_total=order.order_total,
        )

    if not await CheckoutService().mark_checkout_paid(session, order.checkout_id, now=now):
        logger.warning(
            "order_paid_checkout_not_pending order_id=%s checkout_id=%s",
            order.id,
            order.checkout_id,
        )
    await CartService().clear_items(session, order.customer_id)

    await session.commit()
    ORDERS_PAID.labels(source).inc()
    logger.info(
        "order_paid order_id=%s number=%s total=%s source=%s coupon_usage=%s",
        order.id,
        order.order_number,
        order.order_total,
        source,
        usage_recorded,
    )
    return PaidOutcome(order=order, already_processed=False, coupon_usage_recorded=usage_recorded)


__all__ = ["PaidOutcome", "mark_order_paid"]
