# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/webhooks/razorpay_handler.py

Handler de webhooks Razorpay.

Procesa eventos:
- payment.captured / order.paid: marca la orden como pagada (idempotente)
- payment.authorized: pending → authorized
- payment.failed: pending|authorized → failed
Cualquier otro evento se ignora con 200.

La orden se resuelve por notes.order_id y, si falta, por el id de la
orden en el gateway.

Autor: Anne Creations
Fecha: 2026-03-08
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.orders.enums import OrderStatus
from app.modules.orders.models import Order
from app.modules.orders.repository import OrderRepository
from app.modules.orders.services import OrderService
from app.observability.prom import SIGNATURE_MISMATCHES, WEBHOOK_EVENTS
from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.shared.database.types import to_paise
from app.shared.errors import IllegalTransitionError, SignatureMismatchError, ValidationError

from ..services.reconciliation import mark_order_paid
from ..signatures import verify_webhook_signature

logger = logging.getLogger(__name__)

CAPTURE_EVENTS = frozenset({"payment.captured", "order.paid"})


def _entity(payload: Dict[str, Any], kind: str) -> Dict[str, Any]:
    return ((payload.get("payload") or {}).get(kind) or {}).get("entity") or {}


def _notes_order_id(*entities: Dict[str, Any]) -> Optional[UUID]:
    for entity in entities:
        notes = entity.get("notes")
        if isinstance(notes, dict) and notes.get("order_id"):
            try:
                return UUID(str(notes["order_id"]))
            except ValueError:
                logger.warning("Razorpay webhook: notes.order_id inválido %r", notes["order_id"])
    return None


async def _resolve_order(
    session: AsyncSession,
    payment: Dict[str, Any],
    gw_order: Dict[str, Any],
    repo: OrderRepository,
) -> Optional[Order]:
    order_id = _notes_order_id(payment, gw_order)
    if order_id is not None:
        order = await repo.get_by_id(session, order_id)
        if order is not None:
            return order
    gateway_order_id = payment.get("order_id") or gw_order.get("id")
    if gateway_order_id:
        return await repo.get_by_gateway_order_id(session, str(gateway_order_id))
    return None


def _result(status: str, event: str, **extra: Any) -> Dict[str, Any]:
    WEBHOOK_EVENTS.labels(event or "unknown", status).inc()
    return {"status": status, "event": event, **extra}


async def handle_razorpay_webhook(
    session: AsyncSession,
    raw_body: bytes,
    signature_header: Optional[str],
    settings: Optional[PaymentsSettings] = None,
) -> Dict[str, Any]:
    """
    Verifica y procesa un webhook de Razorpay.

    Returns:
        Dict con status processed|ignored|rejected y detalles.

    Raises:
        SignatureMismatchError: firma ausente o inválida.
        ValidationError: cuerpo que no es JSON válido.
    """
    settings = settings or get_payments_settings()

    if not verify_webhook_signature(raw_body, signature_header, settings.razorpay_webhook_secret):
        WEBHOOK_EVENTS.labels("unknown", "bad_signature").inc()
        SIGNATURE_MISMATCHES.labels("webhook").inc()
        raise SignatureMismatchError("Invalid webhook signature")

    try:
        payload = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError("Invalid JSON payload") from e
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    event = str(payload.get("event") or "")
    payment = _entity(payload, "payment")
    gw_order = _entity(payload, "order")

    logger.info(
        "Processing Razorpay webhook: event=%s payment=%s gateway_order=%s",
        event,
        payment.get("id"),
        payment.get("order_id") or gw_order.get("id"),
    )

    if event not in CAPTURE_EVENTS and event not in ("payment.authorized", "payment.failed"):
        return _result("ignored", event, reason="unhandled_event")

    orders = OrderService()
    order = await _resolve_order(session, payment, gw_order, orders.repo)
    if order is None:
        logger.warning("Razorpay webhook: orden no encontrada event=%s", event)
        return _result("ignored", event, reason="order_not_found")

    order_id = order.id
    try:
        if event in CAPTURE_EVENTS:
            return await _handle_capture(session, event, order, payment, gw_order, settings)

        if event == "payment.authorized":
            result = await orders.transition_order(
                session,
                order_id,
                OrderStatus.AUTHORIZED,
                comment=f"Payment authorized. Payment ID: {payment.get('id')}",
                expected_from={OrderStatus.PENDING},
            )
        else:
            reason = payment.get("error_description") or payment.get("error_code") or "unknown"
            result = await orders.transition_order(
                session,
                order_id,
                OrderStatus.FAILED,
                comment=f"Payment failed: {reason}",
                expected_from={OrderStatus.PENDING, OrderStatus.AUTHORIZED},
            )
        await session.commit()
        return _result(
            "processed",
            event,
            order_id=str(order_id),
            order_status=result.order.order_status,
            already_processed=not result.changed,
        )
    except IllegalTransitionError as e:
        await session.rollback()
        logger.warning(
            "Razorpay webhook ignorado: transición ilegal order_id=%s %s -> %s",
            order_id,
            e.from_status,
            e.to_status,
        )
        return _result(
            "ignored",
            event,
            reason="illegal_transition",
            order_id=str(order_id),
            order_status=e.from_status,
        )


async def _handle_capture(
    session: AsyncSession,
    event: str,
    order: Order,
    payment: Dict[str, Any],
    gw_order: Dict[str, Any],
    settings: PaymentsSettings,
) -> Dict[str, Any]:
    amount = payment.get("amount")
    if amount is None:
        amount = gw_order.get("amount_paid")
    expected = to_paise(order.order_total)
    try:
        received = int(amount)
    except (TypeError, ValueError):
        received = None

    if received is None or abs(received - expected) > settings.amount_tolerance_paise:
        logger.error(
            "Razorpay webhook: monto no coincide order_id=%s expected=%s received=%s",
            order.id,
            expected,
            amount,
        )
        return _result(
            "rejected",
            event,
            reason="amount_mismatch",
            order_id=str(order.id),
        )

    outcome = await mark_order_paid(
        session,
        order.id,
        gateway_payment_id=payment.get("id"),
        comment=f"Payment captured via webhook. Payment ID: {payment.get('id')}",
        notify=True,
        source="webhook",
    )
    return _result(
        "processed",
        event,
        order_id=str(order.id),
        order_status=outcome.order.order_status,
        already_processed=outcome.already_processed,
    )


__all__ = ["CAPTURE_EVENTS", "handle_razorpay_webhook"]
