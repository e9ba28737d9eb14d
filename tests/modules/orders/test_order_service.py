# -*- coding: utf-8 -*-
"""
backend/tests/modules/orders/test_order_service.py

Creación de órdenes, compare-and-set de estado e historial.

Autor: Anne Creations
Fecha: 2026-03-10
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from app.modules.coupons.repository import CouponUsageRepository
from app.modules.orders.enums import OrderStatus
from app.modules.orders.services import OrderService, build_totals, parse_order_status
from app.shared.errors import IllegalTransitionError, NotFoundError, ValidationError

from tests.factories import make_coupon, make_order, make_product, start_checkout_for


def test_build_totals_without_discount():
    lines = build_totals(Decimal("1000"), Decimal("0"), Decimal("1000"))
    assert [line["code"] for line in lines] == ["subtotal", "total"]
    assert lines[-1]["value"] == "1000.00"


def test_build_totals_with_coupon_discount():
    lines = build_totals(Decimal("1000"), Decimal("150"), Decimal("850"))
    assert [line["code"] for line in lines] == ["subtotal", "coupon_discount", "total"]
    assert lines[1]["value"] == "-150.00"


@pytest.mark.parametrize("value", ["processing", "shipped", ""])
def test_parse_order_status_rejects_unknown(value):
    with pytest.raises(ValidationError):
        parse_order_status(value)


def test_parse_order_status_normalizes_case():
    assert parse_order_status(" PAID ") is OrderStatus.PAID


@pytest.mark.asyncio
async def test_create_from_checkout_copies_snapshot(db, customer_id):
    product = await make_product(db)
    order = await make_order(db, customer_id, product)

    assert order.order_status == OrderStatus.PENDING.value
    assert order.order_total == Decimal("1000.00")
    assert order.products[0]["product_name"] == "Peacock Motif"
    assert order.total_line("total") == Decimal("1000.00")

    history = await OrderService().get_history(db, order.id)
    assert [h.order_status for h in history] == ["pending"]


@pytest.mark.asyncio
async def test_order_numbers_increase(db, customer_id):
    first = await make_order(db, customer_id, await make_product(db, name="A"))
    second = await make_order(db, uuid4(), await make_product(db, name="B"))
    assert second.order_number == first.order_number + 1


@pytest.mark.asyncio
async def test_each_transition_appends_one_history_row(db, customer_id):
    order = await make_order(db, customer_id, await make_product(db))
    service = OrderService()

    result = await service.transition_order(db, order.id, OrderStatus.AUTHORIZED, comment="Payment authorized")
    await db.commit()

    assert result.changed is True
    assert result.order.order_status == "authorized"
    history = await service.get_history(db, order.id)
    assert [h.order_status for h in history] == ["pending", "authorized"]


@pytest.mark.asyncio
async def test_repeated_transition_to_same_status_is_noop(db, customer_id):
    order = await make_order(db, customer_id, await make_product(db))
    service = OrderService()

    await service.transition_order(db, order.id, OrderStatus.FAILED)
    again = await service.transition_order(db, order.id, OrderStatus.FAILED)
    await db.commit()

    assert again.changed is False
    history = await service.get_history(db, order.id)
    assert len(history) == 2


@pytest.mark.asyncio
async def test_cancelled_order_cannot_be_paid(db, customer_id):
    order = await make_order(db, customer_id, await make_product(db))
    service = OrderService()
    await service.update_order_status(db, order.id, "cancelled")

    with pytest.raises(IllegalTransitionError):
        await service.update_order_status(db, order.id, "paid")

    await db.refresh(order)
    assert order.order_status == "cancelled"
    assert len(await service.get_history(db, order.id)) == 2


@pytest.mark.asyncio
async def test_transition_of_missing_order(db):
    with pytest.raises(NotFoundError):
        await OrderService().transition_order(db, uuid4(), OrderStatus.PAID)


@pytest.mark.asyncio
async def test_update_status_rejects_processing(db, customer_id):
    order = await make_order(db, customer_id, await make_product(db))
    with pytest.raises(ValidationError):
        await OrderService().update_order_status(db, order.id, "processing")


@pytest.mark.asyncio
async def test_admin_paid_records_coupon_usage(db, customer_id):
    coupon = await make_coupon(db, code="FEST150")
    product = await make_product(db)
    checkout = await start_checkout_for(db, customer_id, product)
    from app.modules.coupons.services import CouponEngine

    await CouponEngine().apply_coupon(db, checkout, "FEST150")
    order = await OrderService().create_from_checkout(db, checkout)
    await db.commit()

    result = await OrderService().update_order_status(db, order.id, "paid", comment="Bank transfer received")

    assert result.changed is True
    assert result.order.order_status == "paid"
    assert result.order.paid_at is not None
    assert await CouponUsageRepository().count_total(db, coupon.id) == 1


@pytest.mark.asyncio
async def test_paid_order_can_be_refunded(db, customer_id):
    order = await make_order(db, customer_id, await make_product(db))
    service = OrderService()
    await service.update_order_status(db, order.id, "paid")

    result = await service.update_order_status(db, order.id, "refunded", comment="Refund issued")

    assert result.order.order_status == "refunded"


@pytest.mark.asyncio
async def test_customer_cannot_see_foreign_order(db, customer_id):
    order = await make_order(db, customer_id, await make_product(db))
    with pytest.raises(NotFoundError):
        await OrderService().get_customer_order(db, order.id, uuid4())


@pytest.mark.asyncio
async def test_list_customer_orders_filters_by_status(db, customer_id):
    service = OrderService()
    pending = await make_order(db, customer_id, await make_product(db, name="A"))
    paid = await make_order(db, customer_id, await make_product(db, name="B"))
    await service.update_order_status(db, paid.id, "paid")

    items, total = await service.list_customer_orders(db, customer_id, status="paid")

    assert total == 1
    assert items[0].id == paid.id
    all_items, all_total = await service.list_customer_orders(db, customer_id)
    assert all_total == 2
    assert {o.id for o in all_items} == {pending.id, paid.id}
