# -*- coding: utf-8 -*-
"""
backend/tests/modules/checkout/test_checkout_routes.py

Rutas de checkout.

Autor: Anne Creations
Fecha: 2026-03-10
"""

from uuid import uuid4

import pytest

from tests.factories import fill_cart, make_coupon, make_product


@pytest.mark.asyncio
async def test_start_checkout_endpoint(client, db, customer_id, customer_headers):
    product = await make_product(db)
    await fill_cart(db, customer_id, product)

    resp = await client.post(
        "/api/checkout/start",
        json={"billing_address": {"firstname": "Asha", "email": "asha@example.com"}},
        headers=customer_headers,
    )

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["status"] == "pending"
    assert body["subtotal"] == "1000.00"
    assert body["total"] == "1000.00"
    assert body["billing_address"]["firstname"] == "Asha"
    assert 0 < body["seconds_remaining"] <= 30 * 60
    assert body["auto_apply"]["applied"] is False


@pytest.mark.asyncio
async def test_start_checkout_reports_auto_applied_coupon(client, db, customer_id, customer_headers):
    from decimal import Decimal

    product = await make_product(db)
    await fill_cart(db, customer_id, product)
    await make_coupon(db, code="AUTO10", type="P", discount=Decimal("10"), auto_apply=True)

    body = (await client.post("/api/checkout/start", headers=customer_headers)).json()

    assert body["coupon_code"] == "AUTO10"
    assert body["coupon_source"] == "auto"
    assert body["discount"] == "100.00"
    assert body["total"] == "900.00"
    assert body["auto_apply"]["applied"] is True


@pytest.mark.asyncio
async def test_start_checkout_with_empty_cart_is_400(client, customer_headers):
    resp = await client.post("/api/checkout/start", headers=customer_headers)

    assert resp.status_code == 400
    assert resp.json()["detail"]["error_code"] == "validation_error"


@pytest.mark.asyncio
async def test_get_and_cancel_checkout(client, db, customer_id, customer_headers):
    product = await make_product(db)
    await fill_cart(db, customer_id, product)
    created = (await client.post("/api/checkout/start", headers=customer_headers)).json()

    fetched = await client.get(f"/api/checkout/{created['checkout_id']}", headers=customer_headers)
    assert fetched.status_code == 200

    cancelled = await client.post(f"/api/checkout/{created['checkout_id']}/cancel", headers=customer_headers)
    assert cancelled.json()["status"] == "cancelled"


@pytest.mark.asyncio
async def test_unknown_checkout_is_404(client, customer_headers):
    resp = await client.get(f"/api/checkout/{uuid4()}", headers=customer_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_admin_expire_endpoint(client, admin_headers, customer_headers):
    resp = await client.post("/api/admin/checkouts/expire", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"expired": 0}

    forbidden = await client.post("/api/admin/checkouts/expire", headers=customer_headers)
    assert forbidden.status_code == 403
