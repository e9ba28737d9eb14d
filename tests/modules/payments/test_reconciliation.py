# -*- coding: utf-8 -*-
"""
backend/tests/modules/payments/test_reconciliation.py

mark_order_paid: efectos del paso a 'paid' (ledger de cupones, checkout,
carrito) y su idempotencia.

Autor: Anne Creations
Fecha: 2026-03-10
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from app.modules.cart.services import CartService
from app.modules.checkout import CheckoutStatus
from app.modules.coupons.repository import CouponUsageRepository
from app.modules.coupons.services import CouponEngine
from app.modules.orders.services import OrderService
from app.modules.payments.services import mark_order_paid
from app.shared.errors import IllegalTransitionError, NotFoundError

from tests.factories import make_coupon, make_order, make_product, start_checkout_for


async def _order_with_coupon(db, customer_id, code="FEST150"):
    product = await make_product(db)
    checkout = await start_checkout_for(db, customer_id, product)
    await CouponEngine().apply_coupon(db, checkout, code)
    order = await OrderService().create_from_checkout(db, checkout)
    await db.commit()
    return order, checkout


@pytest.mark.asyncio
async def test_paid_order_records_coupon_usage_once(db, customer_id):
    coupon = await make_coupon(db, code="FEST150")
    order, _ = await _order_with_coupon(db, customer_id)
    usages = CouponUsageRepository()

    first = await mark_order_paid(db, order.id, gateway_payment_id="pay_1")
    second = await mark_order_paid(db, order.id, gateway_payment_id="pay_1")

    assert first.already_processed is False
    assert first.coupon_usage_recorded is True
    assert second.already_processed is True
    assert await usages.count_total(db, coupon.id) == 1

    usage = await usages.get_by_order(db, order.id)
    assert usage.discount_amount == Decimal("150.00")
    assert usage.order_total == Decimal("850.00")


@pytest.mark.asyncio
async def test_paid_order_converts_checkout_and_clears_cart(db, customer_id):
    order = await make_order(db, customer_id, await make_product(db))

    await mark_order_paid(db, order.id, gateway_payment_id="pay_1")

    from app.modules.checkout.services import CheckoutService

    checkout = await CheckoutService().get_checkout(db, order.checkout_id)
    await db.refresh(checkout)
    assert checkout.status == CheckoutStatus.PAID.value
    assert checkout.completed_at is not None
    summary = await CartService().get_cart_summary(db, customer_id)
    assert summary.lines == []


@pytest.mark.asyncio
async def test_paid_transition_with_coupon_appends_one_history_row(db, customer_id):
    await make_coupon(db, code="FEST150")
    order, _ = await _order_with_coupon(db, customer_id)
    service = OrderService()
    before = len(await service.get_history(db, order.id))

    await mark_order_paid(db, order.id, gateway_payment_id="pay_1", comment="Payment captured")
    await mark_order_paid(db, order.id, gateway_payment_id="pay_1", comment="Payment captured")

    history = await service.get_history(db, order.id)
    assert len(history) == before + 1
    assert [h.order_status for h in history] == ["pending", "paid"]
    assert history[-1].comment.startswith("Payment captured. Coupon usage confirmed")
    assert "150.00" in history[-1].comment


@pytest.mark.asyncio
async def test_cap_breach_at_payment_keeps_order_paid_without_usage(db, customer_id):
    coupon = await make_coupon(db, code="ONLY1", total_uses=1)
    order_a, _ = await _order_with_coupon(db, customer_id, code="ONLY1")
    other_customer = uuid4()
    order_b, _ = await _order_with_coupon(db, other_customer, code="ONLY1")

    await mark_order_paid(db, order_a.id, gateway_payment_id="pay_a")
    late = await mark_order_paid(db, order_b.id, gateway_payment_id="pay_b")

    assert late.order.order_status == "paid"
    assert late.coupon_usage_recorded is False
    assert await CouponUsageRepository().count_total(db, coupon.id) == 1
    history = await OrderService().get_history(db, order_b.id)
    assert [h.order_status for h in history] == ["pending", "paid"]
    assert "usage not recorded" in history[-1].comment


@pytest.mark.asyncio
async def test_authorized_order_can_be_paid(db, customer_id):
    from app.modules.orders.enums import OrderStatus

    order = await make_order(db, customer_id, await make_product(db))
    await OrderService().transition_order(db, order.id, OrderStatus.AUTHORIZED)
    await db.commit()

    outcome = await mark_order_paid(db, order.id, gateway_payment_id="pay_1")
    assert outcome.order.order_status == "paid"


@pytest.mark.asyncio
async def test_cancelled_order_cannot_be_paid(db, customer_id):
    order = await make_order(db, customer_id, await make_product(db))
    await OrderService().update_order_status(db, order.id, "cancelled")

    with pytest.raises(IllegalTransitionError):
        await mark_order_paid(db, order.id, gateway_payment_id="pay_1")


@pytest.mark.asyncio
async def test_unknown_order(db):
    with pytest.raises(NotFoundError):
        await mark_order_paid(db, uuid4())
