# -*- coding: utf-8 -*-
"""
backend/tests/modules/downloads/test_download_routes.py

Rutas de descargas: emisión autenticada y entrega del archivo.

Autor: Anne Creations
Fecha: 2026-03-10
"""

from uuid import uuid4

import pytest

from tests.factories import bearer, make_order, make_paid_order, make_product


@pytest.fixture
def design_file(storage_root):
    (storage_root / "designs").mkdir()
    path = storage_root / "designs" / "peacock.dst"
    path.write_bytes(b"DST-DATA")
    return path


@pytest.mark.asyncio
async def test_issue_and_download(client, db, customer_id, customer_headers, design_file):
    order = await make_paid_order(db, customer_id, await make_product(db))

    issued = await client.post(
        "/api/downloads/token",
        json={"order_id": str(order.order_number), "product": "peacock"},
        headers=customer_headers,
    )
    assert issued.status_code == 200, issued.text
    body = issued.json()
    assert body["product_name"] == "Peacock Motif"
    assert body["single_use"] is False

    resp = await client.get(f"/api/downloads/{body['token']}")
    assert resp.status_code == 200
    assert resp.content == b"DST-DATA"
    disposition = resp.headers["content-disposition"]
    assert disposition.startswith("attachment")
    assert "Peacock%20Motif-DST.dst" in disposition


@pytest.mark.asyncio
async def test_pending_order_gets_opaque_403(client, db, customer_id, customer_headers):
    order = await make_order(db, customer_id, await make_product(db))

    resp = await client.post(
        "/api/downloads/token",
        json={"order_id": str(order.id), "product": "peacock"},
        headers=customer_headers,
    )

    assert resp.status_code == 403
    assert resp.json()["detail"] == {
        "error_code": "authorization_failed",
        "message": "Could not verify this purchase",
    }


@pytest.mark.asyncio
async def test_other_customer_gets_same_opaque_403(client, db, customer_id):
    order = await make_paid_order(db, customer_id, await make_product(db))

    resp = await client.post(
        "/api/downloads/token",
        json={"order_id": str(order.id), "product": "peacock"},
        headers=bearer(uuid4()),
    )

    assert resp.status_code == 403
    assert resp.json()["detail"]["message"] == "Could not verify this purchase"


@pytest.mark.asyncio
async def test_bad_token_is_403(client):
    resp = await client.get("/api/downloads/not-a-token")
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_missing_file_is_404(client, db, customer_id, customer_headers):
    order = await make_paid_order(db, customer_id, await make_product(db))
    issued = (
        await client.post(
            "/api/downloads/token",
            json={"order_id": str(order.id), "product": "peacock"},
            headers=customer_headers,
        )
    ).json()

    resp = await client.get(f"/api/downloads/{issued['token']}")

    assert resp.status_code == 404
    assert resp.json()["detail"]["error_code"] == "file_missing"


@pytest.mark.asyncio
async def test_issue_requires_authentication(client):
    resp = await client.post("/api/downloads/token", json={"order_id": "1", "product": "x"})
    assert resp.status_code == 401
