# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/payment_service.py

Servicio de alto nivel para pagos con Razorpay.

Flujos cubiertos:
- Crear la orden de un checkout y su orden en el gateway (idempotente
  por checkout)
- Completar órdenes de total cero sin gateway
- Verificar la firma de pago devuelta por el checkout del cliente
- Registrar el fallo de pago reportado por el cliente

Autor: Anne Creations
Fecha: 2026-03-08
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Set
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.checkout.models import Checkout, CheckoutStatus
from app.modules.checkout.services import CheckoutService
from app.modules.orders.enums import OrderStatus
from app.modules.orders.models import Order
from app.modules.orders.repository import OrderRepository
from app.modules.orders.services import OrderService, TransitionResult
from app.observability.prom import PAYMENT_ORDERS, SIGNATURE_MISMATCHES
from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.shared.database.types import to_money, utcnow
from app.shared.errors import ConflictError, NotFoundError, SignatureMismatchError, ValidationError

from ..providers import PaymentGateway, RazorpayGateway
from ..signatures import verify_payment_signature
from .reconciliation import PaidOutcome, mark_order_paid

logger = logging.getLogger(__name__)

ALREADY_PURCHASED_MESSAGE = (
    "You have already purchased some of these product options. "
    "Please check your orders or downloads."
)


@dataclass
class PaymentOrderResult:
    """Respuesta de create_payment_order."""
    order: Order
    payment_required: bool
    gateway_order_id: Optional[str] = None
    amount: Decimal = Decimal("0.00")
    currency: str = "INR"
    key_id: Optional[str] = None
    message: Optional[str] = None


def _option_ids(line_items) -> Set[str]:
    ids: Set[str] = set()
    for line in line_items or []:
        for opt in line.get("options", []):
            ids.add(str(opt.get("option_id")))
    return ids


class PaymentService:
    """
    Orquesta checkout → orden → gateway → reconciliación.
    """

    def __init__(
        self,
        gateway: Optional[PaymentGateway] = None,
        settings: Optional[PaymentsSettings] = None,
        orders: Optional[OrderService] = None,
        checkouts: Optional[CheckoutService] = None,
    ) -> None:
        self.settings = settings or get_payments_settings()
        self.gateway = gateway or RazorpayGateway(self.settings)
        self.orders = orders or OrderService()
        self.checkouts = checkouts or CheckoutService()

    @property
    def order_repo(self) -> OrderRepository:
        return self.orders.repo

    # ------------------------------------------------------------------ #
    # Creación de la orden de pago
    # ------------------------------------------------------------------ #
    async def create_payment_order(
        self,
        session: AsyncSession,
        checkout_id: UUID,
        customer_id: UUID,
    ) -> PaymentOrderResult:
        """
        Crea (o recupera) la orden del checkout y su orden en el gateway.

        Raises:
            NotFoundError: checkout inexistente o ajeno.
            ValidationError: checkout no pendiente o caducado.
            ConflictError: el cliente ya compró alguna de las opciones.
            PaymentGatewayError: el gateway falló; la orden queda pending.
        """
        existing = await self.order_repo.get_by_checkout(session, checkout_id)
        if existing is not None:
            if existing.customer_id != customer_id:
                raise NotFoundError("Checkout not found", checkout_id=str(checkout_id))
            if existing.order_status == OrderStatus.PAID.value:
                return PaymentOrderResult(
                    order=existing,
                    payment_required=False,
                    amount=existing.order_total,
                    currency=existing.currency,
                    message="Order already paid",
                )
            if existing.order_status != OrderStatus.PENDING.value:
                raise ConflictError(
                    "Order is not in pending status",
                    order_status=existing.order_status,
                )
            await self._ensure_checkout_payable(session, existing, customer_id)
            order = existing
        else:
            checkout = await self.checkouts.get_open_checkout(session, checkout_id, customer_id)
            await self._ensure_not_purchased(session, checkout)
            order = await self._create_order(session, checkout)

        if order.order_total <= 0:
            return await self._complete_free_order(session, order)

        if order.gateway_order_id:
            return self._gateway_result(order)

        # La orden ya está persistida: un fallo del gateway la deja pending
        gateway_order = await self.gateway.create_order(
            amount=order.order_total,
            currency=order.currency,
            receipt=str(order.order_number),
            notes={"order_id": str(order.id), "checkout_id": str(order.checkout_id)},
        )
        order.gateway_order_id = gateway_order.id
        await session.commit()
        PAYMENT_ORDERS.labels("created").inc()

        logger.info(
            "payment_order_created order_id=%s number=%s gateway_order_id=%s amount=%s",
            order.id,
            order.order_number,
            gateway_order.id,
            order.order_total,
        )
        return self._gateway_result(order)

    async def _ensure_checkout_payable(self, session: AsyncSession, order: Order, customer_id: UUID) -> None:
        """
        Una orden pending solo se paga mientras su checkout siga pending y
        sin caducar. Si no, checkout y orden se cancelan juntos.

        Raises:
            ValidationError: el checkout fue cancelado, reemplazado o caducó.
        """
        now = utcnow()
        checkout = await self.checkouts.get_checkout(session, order.checkout_id, customer_id)
        if checkout.is_open(now):
            return

        if checkout.status == CheckoutStatus.PENDING.value:
            reason = "Checkout has expired"
        else:
            reason = "Checkout is not pending"
        await self.checkouts.cancel_checkout(session, checkout.id, now=now)
        logger.info(
            "payment_order_checkout_closed order_id=%s checkout_id=%s reason=%s",
            order.id,
            checkout.id,
            reason,
        )
        raise ValidationError(reason, checkout_id=str(checkout.id), status=checkout.status)

    async def _create_order(self, session: AsyncSession, checkout: Checkout) -> Order:
        checkout_id = checkout.id
        try:
            order = await self.orders.create_from_checkout(
                session, checkout, currency=self.settings.payments_currency
            )
            await session.commit()
            return order
        except IntegrityError:
            # Otro request creó la orden de este checkout
            await session.rollback()
            order = await self.order_repo.get_by_checkout(session, checkout_id)
            if order is None:
                raise
            logger.info("payment_order_create_race checkout_id=%s", checkout_id)
            return order

    async def _ensure_not_purchased(self, session: AsyncSession, checkout: Checkout) -> None:
        wanted = _option_ids(checkout.line_items)
        if not wanted:
            return
        owned: Set[str] = set()
        for paid in await self.order_repo.list_paid_for_customer(session, checkout.customer_id):
            owned.update(paid.purchased_option_ids())
        duplicates = sorted(wanted & owned)
        if duplicates:
            logger.warning(
                "payment_order_duplicate_purchase customer=%s options=%s",
                str(checkout.customer_id)[:8] + "...",
                duplicates,
            )
            raise ConflictError(ALREADY_PURCHASED_MESSAGE, option_ids=duplicates)

    async def _complete_free_order(self, session: AsyncSession, order: Order) -> PaymentOrderResult:
        covered_by_coupon = order.coupon_id is not None
        outcome = await mark_order_paid(
            session,
            order.id,
            comment=(
                "Order completed without payment (coupon covered total)"
                if covered_by_coupon
                else "Order completed without payment (free items)"
            ),
            notify=True,
            source="free",
            payment_method="coupon" if covered_by_coupon else "free",
            payment_code="free",
        )
        PAYMENT_ORDERS.labels("free").inc()
        return PaymentOrderResult(
            order=outcome.order,
            payment_required=False,
            amount=Decimal("0.00"),
            currency=outcome.order.currency,
            message=(
                "Order completed successfully. Coupon covered the full amount."
                if covered_by_coupon
                else "Order completed successfully. No payment required for free items."
            ),
        )

    def _gateway_result(self, order: Order) -> PaymentOrderResult:
        return PaymentOrderResult(
            order=order,
            payment_required=True,
            gateway_order_id=order.gateway_order_id,
            amount=to_money(order.order_total),
            currency=order.currency,
            key_id=self.settings.razorpay_key_id,
        )

    # ------------------------------------------------------------------ #
    # Verificación de firma (callback del checkout)
    # ------------------------------------------------------------------ #
    async def verify_payment(
        self,
        session: AsyncSession,
        *,
        order_id: UUID,
        customer_id: UUID,
        gateway_order_id: str,
        gateway_payment_id: str,
        signature: str,
    ) -> PaidOutcome:
        """
        Verifica la firma del pago y marca la orden como pagada.

        Raises:
            NotFoundError: orden inexistente o ajena.
            SignatureMismatchError: firma inválida u orden de gateway distinta.
        """
        order = await self.orders.get_customer_order(session, order_id, customer_id)

        if not order.gateway_order_id or order.gateway_order_id != gateway_order_id:
            logger.warning(
                "payment_verify_gateway_order_mismatch order_id=%s received=%s",
                order.id,
                gateway_order_id,
            )
            SIGNATURE_MISMATCHES.labels("verify").inc()
            raise SignatureMismatchError()

        if not verify_payment_signature(
            gateway_order_id, gateway_payment_id, signature, self.settings.razorpay_key_secret
        ):
            logger.warning("payment_verify_signature_mismatch order_id=%s", order.id)
            SIGNATURE_MISMATCHES.labels("verify").inc()
            raise SignatureMismatchError()

        return await mark_order_paid(
            session,
            order.id,
            gateway_payment_id=gateway_payment_id,
            comment=f"Payment verified. Payment ID: {gateway_payment_id}",
            notify=True,
            source="checkout",
        )

    # ------------------------------------------------------------------ #
    # Fallo reportado por el cliente
    # ------------------------------------------------------------------ #
    async def report_payment_failure(
        self,
        session: AsyncSession,
        *,
        order_id: UUID,
        customer_id: UUID,
        reason: Optional[str] = None,
    ) -> TransitionResult:
        order = await self.orders.get_customer_order(session, order_id, customer_id)
        result = await self.orders.transition_order(
            session,
            order.id,
            OrderStatus.FAILED,
            comment=f"Payment failed: {reason}" if reason else "Payment failed",
            expected_from={OrderStatus.PENDING},
        )
        await session.commit()
        return result


__all__ = ["ALREADY_PURCHASED_MESSAGE", "PaymentOrderResult", "PaymentService"]
