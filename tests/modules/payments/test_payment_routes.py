# -*- coding: utf-8 -*-
"""
backend/tests/modules/payments/test_payment_routes.py

Endpoints de pago del cliente.

Autor: Anne Creations
Fecha: 2026-03-10
"""

from uuid import uuid4

import pytest

from app.modules.payments.signatures import compute_payment_signature

from tests.factories import KEY_SECRET, FakeGateway, make_product, start_checkout_for


async def _create(client, db, customer_id, customer_headers):
    product = await make_product(db)
    checkout = await start_checkout_for(db, customer_id, product)
    return await client.post(
        "/api/payments/orders",
        json={"checkout_id": str(checkout.id)},
        headers=customer_headers,
    )


@pytest.mark.asyncio
async def test_create_order_endpoint(client, db, customer_id, customer_headers):
    resp = await _create(client, db, customer_id, customer_headers)

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["payment_required"] is True
    assert body["gateway_order_id"] == "order_test_1"
    assert body["amount"] == "1000.00"
    assert body["currency"] == "INR"
    assert body["order_status"] == "pending"


@pytest.mark.asyncio
async def test_verify_endpoint_and_tampered_signature(client, db, customer_id, customer_headers):
    created = (await _create(client, db, customer_id, customer_headers)).json()
    good = compute_payment_signature(created["gateway_order_id"], "pay_9", KEY_SECRET)
    payload = {
        "order_id": created["order_id"],
        "razorpay_order_id": created["gateway_order_id"],
        "razorpay_payment_id": "pay_9",
        "razorpay_signature": "0" * len(good),
    }

    bad = await client.post("/api/payments/verify", json=payload, headers=customer_headers)
    assert bad.status_code == 400
    assert bad.json()["detail"]["error_code"] == "signature_mismatch"

    payload["razorpay_signature"] = good
    ok = await client.post("/api/payments/verify", json=payload, headers=customer_headers)
    assert ok.status_code == 200
    assert ok.json()["order_status"] == "paid"
    assert ok.json()["already_processed"] is False


@pytest.mark.asyncio
async def test_gateway_error_is_502(app, client, db, customer_id, customer_headers):
    from app.modules.payments.providers import get_payment_gateway

    app.dependency_overrides[get_payment_gateway] = lambda: FakeGateway(fail=True)

    resp = await _create(client, db, customer_id, customer_headers)

    assert resp.status_code == 502
    assert resp.json()["detail"]["error_code"] == "payment_gateway_error"


@pytest.mark.asyncio
async def test_failure_endpoint(client, db, customer_id, customer_headers):
    created = (await _create(client, db, customer_id, customer_headers)).json()

    resp = await client.post(
        f"/api/payments/{created['order_id']}/failure",
        json={"reason": "User closed the payment window"},
        headers=customer_headers,
    )

    assert resp.status_code == 200
    assert resp.json() == {"order_id": created["order_id"], "order_status": "failed", "changed": True}


@pytest.mark.asyncio
async def test_payment_endpoints_require_auth(client):
    resp = await client.post("/api/payments/orders", json={"checkout_id": str(uuid4())})
    assert resp.status_code == 401
