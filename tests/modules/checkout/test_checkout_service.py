# -*- coding: utf-8 -*-
"""
backend/tests/modules/checkout/test_checkout_service.py

Inicio, lectura y cancelación de checkouts.

Autor: Anne Creations
Fecha: 2026-03-10
"""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from app.modules.checkout import CheckoutStatus
from app.modules.checkout.services import CheckoutService
from app.shared.errors import NotFoundError, ValidationError

from tests.factories import fill_cart, make_product, start_checkout_for


@pytest.mark.asyncio
async def test_start_checkout_snapshots_cart_prices(db, customer_id):
    product = await make_product(db)
    checkout = await start_checkout_for(db, customer_id, product)

    assert checkout.status == CheckoutStatus.PENDING.value
    assert checkout.subtotal_amount == Decimal("1000.00")
    assert checkout.total_amount == Decimal("1000.00")
    assert checkout.line_items[0]["product_name"] == "Peacock Motif"
    assert checkout.line_items[0]["options"][0]["price"] == "1000.00"

    # Un cambio de precio posterior no altera el snapshot
    product.options[0].price = Decimal("10.00")
    await db.commit()
    reloaded = await CheckoutService().get_checkout(db, checkout.id, customer_id)
    assert reloaded.subtotal_amount == Decimal("1000.00")


@pytest.mark.asyncio
async def test_start_checkout_sets_ttl(db, customer_id):
    product = await make_product(db)
    await fill_cart(db, customer_id, product)

    service = CheckoutService(ttl_minutes=30)
    started = await service.start_checkout(db, customer_id)

    lifetime = started.checkout.expires_at - started.checkout.created_at
    assert timedelta(minutes=29) < lifetime <= timedelta(minutes=30, seconds=5)


@pytest.mark.asyncio
async def test_start_checkout_with_empty_cart(db, customer_id):
    with pytest.raises(ValidationError) as exc:
        await CheckoutService().start_checkout(db, customer_id)
    assert exc.value.message == "Cart is empty"


@pytest.mark.asyncio
async def test_start_checkout_with_unavailable_item(db, customer_id):
    product = await make_product(db)
    await fill_cart(db, customer_id, product)
    product.status = False
    await db.commit()

    with pytest.raises(ValidationError) as exc:
        await CheckoutService().start_checkout(db, customer_id)
    assert exc.value.context["product_ids"] == [str(product.id)]


@pytest.mark.asyncio
async def test_new_checkout_supersedes_previous_pending(db, customer_id):
    product = await make_product(db)
    first = await start_checkout_for(db, customer_id, product)
    second = (await CheckoutService().start_checkout(db, customer_id)).checkout

    await db.refresh(first)
    assert first.status == CheckoutStatus.CANCELLED.value
    assert second.status == CheckoutStatus.PENDING.value
    assert first.id != second.id


@pytest.mark.asyncio
async def test_get_checkout_of_other_customer_is_not_found(db, customer_id):
    product = await make_product(db)
    checkout = await start_checkout_for(db, customer_id, product)

    with pytest.raises(NotFoundError):
        await CheckoutService().get_checkout(db, checkout.id, uuid4())


@pytest.mark.asyncio
async def test_get_open_checkout_rejects_expired(db, customer_id):
    product = await make_product(db)
    checkout = await start_checkout_for(db, customer_id, product)

    with pytest.raises(ValidationError) as exc:
        await CheckoutService().get_open_checkout(
            db, checkout.id, customer_id, now=checkout.expires_at + timedelta(seconds=1)
        )
    assert exc.value.message == "Checkout has expired"


@pytest.mark.asyncio
async def test_cancel_checkout_is_idempotent(db, customer_id):
    product = await make_product(db)
    checkout = await start_checkout_for(db, customer_id, product)
    service = CheckoutService()

    cancelled = await service.cancel_checkout(db, checkout.id, customer_id)
    again = await service.cancel_checkout(db, checkout.id, customer_id)

    assert cancelled.status == CheckoutStatus.CANCELLED.value
    assert again.status == CheckoutStatus.CANCELLED.value
    with pytest.raises(ValidationError) as exc:
        await service.get_open_checkout(db, checkout.id, customer_id)
    assert exc.value.message == "Checkout is not pending"


@pytest.mark.asyncio
async def test_mark_checkout_paid_only_from_pending(db, customer_id):
    product = await make_product(db)
    checkout = await start_checkout_for(db, customer_id, product)
    service = CheckoutService()

    assert await service.mark_checkout_paid(db, checkout.id) is True
    assert await service.mark_checkout_paid(db, checkout.id) is False
    await db.commit()

    # Un checkout pagado nunca se cancela
    await service.cancel_checkout(db, checkout.id, customer_id)
    await db.refresh(checkout)
    assert checkout.status == CheckoutStatus.PAID.value
