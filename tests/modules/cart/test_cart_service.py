# -*- coding: utf-8 -*-
"""
backend/tests/modules/cart/test_cart_service.py

Carrito: fusión de opciones, validación contra catálogo y resumen.

Autor: Anne Creations
Fecha: 2026-03-10
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from app.modules.cart.services import CartService
from app.shared.errors import NotFoundError, ValidationError

from tests.factories import make_product

TWO_OPTIONS = (
    ("DST", "500.00", "designs/rose.dst"),
    ("PES", "300.00", "designs/rose.pes"),
)


@pytest.mark.asyncio
async def test_add_item_merges_options_into_one_line(db, customer_id):
    product = await make_product(db, name="Rose", options=TWO_OPTIONS)
    dst, pes = product.options
    service = CartService()

    await service.add_item(db, customer_id, product.id, [dst.id])
    await service.add_item(db, customer_id, product.id, [pes.id, dst.id])

    summary = await service.get_cart_summary(db, customer_id)
    assert len(summary.lines) == 1
    assert summary.lines[0].option_ids == [dst.id, pes.id]
    assert summary.item_count == 2
    assert summary.subtotal == Decimal("800.00")


@pytest.mark.asyncio
async def test_add_item_rejects_option_of_another_product(db, customer_id):
    rose = await make_product(db, name="Rose", options=TWO_OPTIONS)
    lotus = await make_product(db, name="Lotus")

    with pytest.raises(ValidationError):
        await CartService().add_item(db, customer_id, rose.id, [lotus.options[0].id])


@pytest.mark.asyncio
async def test_add_item_rejects_inactive_product(db, customer_id):
    product = await make_product(db)
    product.status = False
    await db.commit()

    with pytest.raises(ValidationError):
        await CartService().add_item(db, customer_id, product.id, [product.options[0].id])


@pytest.mark.asyncio
async def test_summary_marks_lines_unavailable_after_catalog_change(db, customer_id):
    product = await make_product(db)
    service = CartService()
    await service.add_item(db, customer_id, product.id, [product.options[0].id])

    product.options[0].status = False
    await db.commit()

    summary = await service.get_cart_summary(db, customer_id)
    assert summary.has_unavailable is True
    assert summary.subtotal == Decimal("0.00")


@pytest.mark.asyncio
async def test_summary_uses_current_prices(db, customer_id):
    product = await make_product(db)
    service = CartService()
    await service.add_item(db, customer_id, product.id, [product.options[0].id])

    product.options[0].price = Decimal("1200.00")
    await db.commit()

    summary = await service.get_cart_summary(db, customer_id)
    assert summary.subtotal == Decimal("1200.00")


@pytest.mark.asyncio
async def test_remove_unknown_item_is_not_found(db, customer_id):
    with pytest.raises(NotFoundError):
        await CartService().remove_item(db, customer_id, uuid4())


@pytest.mark.asyncio
async def test_clear_cart(db, customer_id):
    product = await make_product(db, options=TWO_OPTIONS)
    service = CartService()
    await service.add_item(db, customer_id, product.id, [product.options[0].id])

    assert await service.clear_cart(db, customer_id) == 1
    summary = await service.get_cart_summary(db, customer_id)
    assert summary.lines == []


@pytest.mark.asyncio
async def test_cart_routes_add_and_read(client, db, customer_headers):
    product = await make_product(db, options=TWO_OPTIONS)

    resp = await client.post(
        "/api/cart/items",
        json={"product_id": str(product.id), "option_ids": [str(o.id) for o in product.options]},
        headers=customer_headers,
    )
    assert resp.status_code == 201, resp.text

    body = (await client.get("/api/cart", headers=customer_headers)).json()
    assert body["item_count"] == 2
    assert body["subtotal"] == "800.00"
    assert body["items"][0]["product_name"] == "Peacock Motif"


@pytest.mark.asyncio
async def test_cart_requires_authentication(client):
    resp = await client.get("/api/cart")
    assert resp.status_code == 401
