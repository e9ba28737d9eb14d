# -*- coding: utf-8 -*-
"""
backend/app/modules/checkout/services/checkout_service.py

Staging del checkout: congela el carrito con precios vigentes, aplica el
cupón automático si califica y controla la caducidad.

Flujo:
1. start_checkout: carrito → snapshot → Checkout(pending, expires_at)
2. cupones (módulo coupons) ajustan discount/total mientras siga abierto
3. mark_checkout_paid: única conversión Checkout → Orden pagada
4. cancel_checkout / cleanup_expired: pending → cancelled

El carrito no se toca hasta que el pago se confirma.

Autor: Anne Creations
Fecha: 2026-03-05
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.settings import get_settings
from app.modules.cart.services import CartService
from app.modules.coupons.services import AutoApplyResult, CouponEngine
from app.modules.orders.services import OrderService
from app.shared.database.types import to_money, utcnow
from app.shared.errors import NotFoundError, ValidationError

from ..models import Checkout, CheckoutStatus
from ..repository import CheckoutRepository

logger = logging.getLogger(__name__)


@dataclass
class CheckoutStart:
    checkout: Checkout
    auto_apply: AutoApplyResult


class CheckoutService:

    def __init__(
        self,
        repo: Optional[CheckoutRepository] = None,
        cart_service: Optional[CartService] = None,
        coupon_engine: Optional[CouponEngine] = None,
        ttl_minutes: Optional[int] = None,
        orders: Optional[OrderService] = None,
    ):
        self.repo = repo or CheckoutRepository()
        self.orders = orders or OrderService()
        self.cart_service = cart_service or CartService()
        self.coupon_engine = coupon_engine or CouponEngine()
        self._ttl_minutes = ttl_minutes

    @property
    def ttl(self) -> timedelta:
        minutes = self._ttl_minutes if self._ttl_minutes is not None else get_settings().checkout_ttl_minutes
        return timedelta(minutes=minutes)

    # ------------------------------------------------------------------
    # Inicio
    # ------------------------------------------------------------------
    async def start_checkout(
        self,
        session: AsyncSession,
        customer_id: UUID,
        billing_snapshot: Optional[Dict[str, Any]] = None,
        now: Optional[datetime] = None,
    ) -> CheckoutStart:
        """
        Crea el checkout pendiente del cliente a partir de su carrito.

        Raises:
            ValidationError: carrito vacío o con productos no disponibles.
        """
        now = now or utcnow()
        summary = await self.cart_service.get_cart_summary(session, customer_id)

        if not summary.lines:
            raise ValidationError("Cart is empty")
        if summary.has_unavailable:
            unavailable = [str(line.product_id) for line in summary.lines if not line.available]
            raise ValidationError(
                "Some cart items are no longer available",
                product_ids=unavailable,
            )

        line_items = [line.snapshot for line in summary.lines]
        subtotal = summary.subtotal

        # Un solo pending por cliente: el anterior se cancela antes de insertar
        superseded = await self.repo.cancel_pending_for_customer(session, customer_id, now)
        if superseded:
            await self.orders.cancel_pending_for_checkouts(
                session, superseded, comment="Checkout superseded by a new checkout"
            )
            logger.info(
                "checkout_superseded customer=%s count=%d",
                str(customer_id)[:8] + "...",
                len(superseded),
            )

        checkout = Checkout(
            customer_id=customer_id,
            cart_id=summary.cart_id,
            status=CheckoutStatus.PENDING.value,
            line_items=line_items,
            billing_snapshot=billing_snapshot,
            subtotal_amount=subtotal,
            discount_amount=Decimal("0.00"),
            total_amount=subtotal,
            declined_coupon_ids=[],
            expires_at=now + self.ttl,
        )
        try:
            session.add(checkout)
            await session.flush()
        except IntegrityError:
            # Otro request creó el pending entre el cancel y el insert
            await session.rollback()
            existing = await self.repo.get_pending_for_customer(session, customer_id)
            if existing is None:
                raise
            logger.info("checkout_start_race customer=%s", str(customer_id)[:8] + "...")
            auto = await self.coupon_engine.evaluate_auto_apply(session, existing, now=now)
            await session.commit()
            return CheckoutStart(checkout=existing, auto_apply=auto)

        auto = await self.coupon_engine.evaluate_auto_apply(session, checkout, now=now)
        await session.commit()

        logger.info(
            "checkout_started id=%s customer=%s subtotal=%s total=%s coupon=%s",
            checkout.id,
            str(customer_id)[:8] + "...",
            checkout.subtotal_amount,
            checkout.total_amount,
            checkout.coupon_code,
        )
        return CheckoutStart(checkout=checkout, auto_apply=auto)

    # ------------------------------------------------------------------
    # Lectura / cancelación
    # ------------------------------------------------------------------
    async def get_checkout(
        self,
        session: AsyncSession,
        checkout_id: UUID,
        customer_id: Optional[UUID] = None,
    ) -> Checkout:
        """Checkout propio del cliente; uno ajeno se reporta como inexistente."""
        checkout = await self.repo.get_by_id(session, checkout_id)
        if checkout is None or (customer_id is not None and checkout.customer_id != customer_id):
            raise NotFoundError("Checkout not found", checkout_id=str(checkout_id))
        return checkout

    async def get_open_checkout(
        self,
        session: AsyncSession,
        checkout_id: UUID,
        customer_id: UUID,
        now: Optional[datetime] = None,
    ) -> Checkout:
        now = now or utcnow()
        checkout = await self.get_checkout(session, checkout_id, customer_id)
        if checkout.status != CheckoutStatus.PENDING.value:
            raise ValidationError("Checkout is not pending", status=checkout.status)
        if checkout.is_expired(now):
            raise ValidationError("Checkout has expired", checkout_id=str(checkout.id))
        return checkout

    async def cancel_checkout(
        self,
        session: AsyncSession,
        checkout_id: UUID,
        customer_id: Optional[UUID] = None,
        now: Optional[datetime] = None,
    ) -> Checkout:
        """
        pending → cancelled, junto con la orden pending que tenga asociada.
        En estados terminales no cambia el checkout.
        """
        now = now or utcnow()
        checkout = await self.get_checkout(session, checkout_id, customer_id)
        cancelled = await self.repo.cancel_if_pending(session, checkout.id, now)
        await session.refresh(checkout)
        orders_cancelled = 0
        if checkout.status == CheckoutStatus.CANCELLED.value:
            orders_cancelled = await self.orders.cancel_pending_for_checkouts(session, [checkout.id])
        await session.commit()
        if cancelled or orders_cancelled:
            logger.info("checkout_cancelled id=%s orders_cancelled=%d", checkout.id, orders_cancelled)
        return checkout

    # ------------------------------------------------------------------
    # Conversión (uso interno de pagos)
    # ------------------------------------------------------------------
    async def mark_checkout_paid(
        self,
        session: AsyncSession,
        checkout_id: UUID,
        now: Optional[datetime] = None,
    ) -> bool:
        """
        pending → paid dentro de la transacción del llamador.

        Returns:
            True si esta llamada hizo la transición.
        """
        now = now or utcnow()
        converted = await self.repo.mark_paid_if_pending(session, checkout_id, now)
        if not converted:
            logger.info("checkout_mark_paid_skipped id=%s", checkout_id)
        return converted


def checkout_totals(checkout: Checkout) -> Dict[str, Decimal]:
    return {
        "subtotal": to_money(checkout.subtotal_amount),
        "discount": to_money(checkout.discount_amount),
        "total": to_money(checkout.total_amount),
    }


__all__ = ["CheckoutService", "CheckoutStart", "checkout_totals"]
