# -*- coding: utf-8 -*-
"""
backend/tests/modules/downloads/test_download_service.py

Emisión y consumo de tokens de descarga.

Autor: Anne Creations
Fecha: 2026-03-10
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from app.modules.downloads.services import DownloadService, build_download_filename
from app.modules.downloads.tokens import read_download_claim, sign_download_claim
from app.modules.orders.services import OrderService
from app.shared.errors import AuthorizationFailure, StorageMissingError

from tests.factories import make_order, make_paid_order, make_product

OPTIONS = (
    ("DST", "500.00", "designs/peacock.dst"),
    ("PES", "300.00", "designs/peacock.pes"),
)


@pytest.fixture
def service(storage):
    return DownloadService(storage=storage)


@pytest.fixture
def design_files(storage_root):
    (storage_root / "designs").mkdir()
    (storage_root / "designs" / "peacock.dst").write_bytes(b"DST-DATA")
    (storage_root / "designs" / "peacock.pes").write_bytes(b"PES-DATA-LONGER")
    return storage_root


async def _paid(db, customer_id):
    product = await make_product(db, options=OPTIONS)
    option_ids = [o.id for o in product.options]
    order = await make_paid_order(db, customer_id, product, option_ids)
    return order, product


def test_build_download_filename():
    assert build_download_filename("Peacock Motif", "DST", "designs/peacock.dst") == "Peacock Motif-DST.dst"
    assert build_download_filename('A/B "x"', "PES", "a\\b\\c.pes") == "A_B _x_-PES.pes"


def test_download_claim_round_trip_and_type_check():
    ids = (uuid4(), uuid4(), uuid4())
    token, claim = sign_download_claim(*ids)

    read = read_download_claim(token)
    assert read is not None
    assert (read.order_id, read.product_id, read.option_id) == ids
    assert read.jti == claim.jti

    assert read_download_claim(token + "x") is None
    assert read_download_claim("not-a-token") is None


def test_expired_claim_is_rejected():
    past = datetime.now(tz=timezone.utc) - timedelta(hours=2)
    token, _ = sign_download_claim(uuid4(), uuid4(), uuid4(), expires_minutes=5, now=past)
    assert read_download_claim(token) is None


# ---------------------------------------------------------------------------
# Emisión
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_pending_order_cannot_issue_token(db, service, customer_id):
    order = await make_order(db, customer_id, await make_product(db))

    with pytest.raises(AuthorizationFailure) as exc:
        await service.issue_download_token(db, str(order.id), "Peacock", customer_id=customer_id)
    assert exc.value.message == "Could not verify this purchase"


@pytest.mark.asyncio
async def test_issue_by_order_number_and_product_name(db, service, customer_id):
    order, product = await _paid(db, customer_id)

    issued = await service.issue_download_token(
        db, f"#{order.order_number}", "peacock", option_identifier="pes", customer_id=customer_id
    )

    assert issued.order_id == order.id
    assert issued.product_id == product.id
    assert issued.option_name == "PES"
    assert issued.download_url.endswith(f"/api/downloads/{issued.token}")


@pytest.mark.asyncio
async def test_issue_defaults_to_first_option(db, service, customer_id):
    order, product = await _paid(db, customer_id)

    issued = await service.issue_download_token(db, str(order.id), str(product.id))

    assert issued.option_id == product.options[0].id


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "product_ref, option_ref",
    [("Lotus", None), ("Peacock", "EXP"), (str(uuid4()), None)],
)
async def test_issue_for_item_not_in_order_fails(db, service, customer_id, product_ref, option_ref):
    order, _ = await _paid(db, customer_id)

    with pytest.raises(AuthorizationFailure):
        await service.issue_download_token(
            db, str(order.id), product_ref, option_identifier=option_ref, customer_id=customer_id
        )


@pytest.mark.asyncio
async def test_issue_for_foreign_order_fails(db, service, customer_id):
    order, _ = await _paid(db, customer_id)

    with pytest.raises(AuthorizationFailure):
        await service.issue_download_token(db, str(order.id), "Peacock", customer_id=uuid4())


@pytest.mark.asyncio
async def test_issue_for_unknown_order_fails(db, service):
    with pytest.raises(AuthorizationFailure):
        await service.issue_download_token(db, "999999", "Peacock")


@pytest.mark.asyncio
@pytest.mark.parametrize("order_ref", ["²", "#١٢", "99999999999999999999", "0", "#"])
async def test_malformed_order_number_is_authorization_failure(db, service, order_ref):
    with pytest.raises(AuthorizationFailure):
        await service.issue_download_token(db, order_ref, "Peacock")


# ---------------------------------------------------------------------------
# Consumo
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_consume_returns_file(db, service, customer_id, design_files):
    order, _ = await _paid(db, customer_id)
    issued = await service.issue_download_token(db, str(order.id), "Peacock", "DST")

    found = await service.consume_download_token(db, issued.token)

    assert found.path == (design_files / "designs" / "peacock.dst").resolve()
    assert found.filename == "Peacock Motif-DST.dst"
    assert found.size == len(b"DST-DATA")
    assert found.media_type


@pytest.mark.asyncio
async def test_consume_is_reusable_by_default(db, service, customer_id, design_files):
    order, _ = await _paid(db, customer_id)
    issued = await service.issue_download_token(db, str(order.id), "Peacock")

    await service.consume_download_token(db, issued.token)
    await service.consume_download_token(db, issued.token)


@pytest.mark.asyncio
async def test_single_use_token_cannot_be_replayed(db, service, customer_id, design_files, monkeypatch):
    monkeypatch.setattr(service.settings, "download_token_single_use", True)
    order, _ = await _paid(db, customer_id)
    issued = await service.issue_download_token(db, str(order.id), "Peacock")

    await service.consume_download_token(db, issued.token)
    with pytest.raises(AuthorizationFailure):
        await service.consume_download_token(db, issued.token)


@pytest.mark.asyncio
async def test_missing_file_is_storage_error(db, service, customer_id):
    order, _ = await _paid(db, customer_id)
    issued = await service.issue_download_token(db, str(order.id), "Peacock")

    with pytest.raises(StorageMissingError) as exc:
        await service.consume_download_token(db, issued.token)
    assert exc.value.message == "File missing on server"


@pytest.mark.asyncio
async def test_option_without_file_is_storage_error(db, service, customer_id):
    product = await make_product(db, options=(("DST", "100.00", None),))
    order = await make_paid_order(db, customer_id, product)
    issued = await service.issue_download_token(db, str(order.id), "Peacock")

    with pytest.raises(StorageMissingError):
        await service.consume_download_token(db, issued.token)


@pytest.mark.asyncio
async def test_path_outside_root_is_storage_error(db, service, customer_id, design_files):
    product = await make_product(db, options=(("DST", "100.00", "../../etc/passwd"),))
    order = await make_paid_order(db, customer_id, product)
    issued = await service.issue_download_token(db, str(order.id), "Peacock")

    with pytest.raises(StorageMissingError):
        await service.consume_download_token(db, issued.token)


@pytest.mark.asyncio
async def test_tampered_token_is_authorization_failure(db, service):
    with pytest.raises(AuthorizationFailure):
        await service.consume_download_token(db, "eyJhbGciOiJIUzI1NiJ9.e30.invalid")


@pytest.mark.asyncio
async def test_refunded_order_revokes_downloads(db, service, customer_id, design_files):
    order, _ = await _paid(db, customer_id)
    issued = await service.issue_download_token(db, str(order.id), "Peacock")

    await OrderService().update_order_status(db, order.id, "refunded")

    with pytest.raises(AuthorizationFailure):
        await service.consume_download_token(db, issued.token)
