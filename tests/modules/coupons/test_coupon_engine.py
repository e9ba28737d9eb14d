# -*- coding: utf-8 -*-
"""
backend/tests/modules/coupons/test_coupon_engine.py

Aplicación manual, auto-apply y retiro de cupones sobre un checkout.

Autor: Anne Creations
Fecha: 2026-03-10
"""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from app.modules.checkout import CouponSource
from app.modules.coupons.enums import IneligibleKind
from app.modules.coupons.repository import CouponUsageRepository
from app.modules.coupons.services import CouponEngine
from app.shared.database.types import utcnow
from app.shared.errors import IneligibleCouponError, ValidationError

from tests.factories import make_coupon, make_order, make_product, start_checkout_for


async def _checkout(db, customer_id, price="1000.00"):
    product = await make_product(db, options=(("DST", price, "designs/a.dst"),))
    return await start_checkout_for(db, customer_id, product)


async def _record_usage(db, coupon, customer_id):
    product = await make_product(db, name="Ledger Filler")
    order = await make_order(db, customer_id, product)
    await CouponUsageRepository().record_usage(
        db,
        coupon_id=coupon.id,
        customer_id=customer_id,
        order_id=order.id,
        discount_amount=Decimal("150.00"),
        order_total=Decimal("850.00"),
    )
    await db.commit()


# ---------------------------------------------------------------------------
# Manual
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_apply_fixed_coupon_updates_checkout_totals(db, customer_id):
    checkout = await _checkout(db, customer_id)
    await make_coupon(db, code="FEST150")

    applied = await CouponEngine().apply_coupon(db, checkout, "FEST150")

    assert applied.result == "applied"
    assert applied.calculation.discount_amount == Decimal("150.00")
    assert checkout.discount_amount == Decimal("150.00")
    assert checkout.total_amount == Decimal("850.00")
    assert checkout.coupon_source == CouponSource.MANUAL.value


@pytest.mark.asyncio
async def test_apply_percentage_coupon_respects_max_discount(db, customer_id):
    checkout = await _checkout(db, customer_id)
    await make_coupon(db, code="TWENTY", type="P", discount=Decimal("20"), max_discount=Decimal("150"))

    applied = await CouponEngine().apply_coupon(db, checkout, "TWENTY")

    assert applied.calculation.discount_amount == Decimal("150.00")
    assert checkout.total_amount == Decimal("850.00")


@pytest.mark.asyncio
async def test_apply_below_minimum_raises_and_leaves_totals(db, customer_id):
    checkout = await _checkout(db, customer_id)
    await make_coupon(db, code="BIG", min_amount=Decimal("1500.00"))

    with pytest.raises(IneligibleCouponError) as exc:
        await CouponEngine().apply_coupon(db, checkout, "BIG")

    assert exc.value.kind == IneligibleKind.BELOW_MINIMUM.value
    assert checkout.coupon_id is None
    assert checkout.discount_amount == Decimal("0.00")
    assert checkout.total_amount == Decimal("1000.00")


@pytest.mark.asyncio
async def test_apply_code_is_case_insensitive_by_default(db, customer_id):
    checkout = await _checkout(db, customer_id)
    await make_coupon(db, code="FEST150")

    applied = await CouponEngine().apply_coupon(db, checkout, "  fest150 ")
    assert applied.coupon.code == "FEST150"


@pytest.mark.asyncio
async def test_apply_same_coupon_twice_reports_already_applied(db, customer_id):
    checkout = await _checkout(db, customer_id)
    await make_coupon(db, code="FEST150")
    engine = CouponEngine()

    await engine.apply_coupon(db, checkout, "FEST150")
    again = await engine.apply_coupon(db, checkout, "FEST150")

    assert again.result == "already_applied"
    assert checkout.total_amount == Decimal("850.00")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides, kind",
    [
        ({"status": False}, IneligibleKind.INACTIVE),
        ({"date_start": utcnow() + timedelta(days=2)}, IneligibleKind.NOT_STARTED),
        (
            {"date_start": utcnow() - timedelta(days=10), "date_end": utcnow() - timedelta(days=1)},
            IneligibleKind.EXPIRED,
        ),
    ],
)
async def test_apply_rejects_ineligible_coupons(db, customer_id, overrides, kind):
    checkout = await _checkout(db, customer_id)
    await make_coupon(db, code="NOPE", **overrides)

    with pytest.raises(IneligibleCouponError) as exc:
        await CouponEngine().apply_coupon(db, checkout, "NOPE")
    assert exc.value.kind == kind.value


@pytest.mark.asyncio
async def test_apply_unknown_code(db, customer_id):
    checkout = await _checkout(db, customer_id)
    with pytest.raises(IneligibleCouponError) as exc:
        await CouponEngine().apply_coupon(db, checkout, "GHOST")
    assert exc.value.kind == IneligibleKind.NOT_FOUND.value


@pytest.mark.asyncio
@pytest.mark.parametrize("code", ["", "   ", "X" * 51])
async def test_apply_malformed_code_is_validation_error(db, customer_id, code):
    checkout = await _checkout(db, customer_id)
    with pytest.raises(ValidationError):
        await CouponEngine().apply_coupon(db, checkout, code)


@pytest.mark.asyncio
async def test_apply_on_expired_checkout_is_rejected(db, customer_id):
    checkout = await _checkout(db, customer_id)
    await make_coupon(db, code="FEST150")

    with pytest.raises(ValidationError):
        await CouponEngine().apply_coupon(
            db, checkout, "FEST150", now=checkout.expires_at + timedelta(seconds=1)
        )


@pytest.mark.asyncio
async def test_customer_usage_cap_blocks_manual_apply(db, customer_id):
    coupon = await make_coupon(db, code="ONCE", customer_uses=1)
    await _record_usage(db, coupon, customer_id)
    checkout = await _checkout(db, customer_id)

    with pytest.raises(IneligibleCouponError) as exc:
        await CouponEngine().apply_coupon(db, checkout, "ONCE")
    assert exc.value.kind == IneligibleKind.CUSTOMER_LIMIT_REACHED.value


@pytest.mark.asyncio
async def test_total_usage_cap_blocks_other_customers(db, customer_id):
    coupon = await make_coupon(db, code="FIRST1", total_uses=1)
    await _record_usage(db, coupon, uuid4())
    checkout = await _checkout(db, customer_id)

    with pytest.raises(IneligibleCouponError) as exc:
        await CouponEngine().apply_coupon(db, checkout, "FIRST1")
    assert exc.value.kind == IneligibleKind.USAGE_LIMIT_REACHED.value


# ---------------------------------------------------------------------------
# Auto-apply
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_start_checkout_auto_applies_eligible_coupon(db, customer_id):
    await make_coupon(db, code="AUTO10", type="P", discount=Decimal("10"), auto_apply=True)
    product = await make_product(db)

    checkout = await start_checkout_for(db, customer_id, product)

    assert checkout.coupon_code == "AUTO10"
    assert checkout.coupon_source == CouponSource.AUTO.value
    assert checkout.total_amount == Decimal("900.00")


@pytest.mark.asyncio
async def test_auto_apply_below_minimum_is_reported_as_data(db, customer_id):
    await make_coupon(
        db, code="AUTO20", type="P", discount=Decimal("20"), min_amount=Decimal("1500"), auto_apply=True
    )
    checkout = await _checkout(db, customer_id)

    result = await CouponEngine().evaluate_auto_apply(db, checkout)

    assert result.applied is False
    assert result.amount_needed == Decimal("500.00")
    assert result.reason == "Add ₹500.00 more to get 20% discount."
    assert checkout.coupon_id is None


@pytest.mark.asyncio
async def test_auto_apply_without_candidates(db, customer_id):
    checkout = await _checkout(db, customer_id)
    result = await CouponEngine().evaluate_auto_apply(db, checkout)
    assert result.applied is False
    assert result.reason == "No auto-apply coupon available"


@pytest.mark.asyncio
async def test_auto_apply_respects_customer_cap(db, customer_id):
    coupon = await make_coupon(db, code="AUTOONCE", auto_apply=True, customer_uses=1)
    await _record_usage(db, coupon, customer_id)
    product = await make_product(db, name="Lotus")

    checkout = await start_checkout_for(db, customer_id, product)

    assert checkout.coupon_id is None


@pytest.mark.asyncio
async def test_remove_coupon_does_not_reattach_declined_auto_coupon(db, customer_id):
    await make_coupon(db, code="AUTO10", type="P", discount=Decimal("10"), auto_apply=True)
    product = await make_product(db)
    checkout = await start_checkout_for(db, customer_id, product)
    assert checkout.coupon_code == "AUTO10"

    result = await CouponEngine().remove_coupon(db, checkout)

    assert result.applied is False
    assert checkout.coupon_id is None
    assert checkout.total_amount == Decimal("1000.00")
    assert len(checkout.declined_coupon_ids) == 1


@pytest.mark.asyncio
async def test_manual_coupon_replaces_auto_coupon(db, customer_id):
    await make_coupon(db, code="AUTO10", type="P", discount=Decimal("10"), auto_apply=True)
    await make_coupon(db, code="FEST150")
    product = await make_product(db)
    checkout = await start_checkout_for(db, customer_id, product)

    await CouponEngine().apply_coupon(db, checkout, "FEST150")

    assert checkout.coupon_code == "FEST150"
    assert checkout.coupon_source == CouponSource.MANUAL.value
    assert checkout.total_amount == Decimal("850.00")


@pytest.mark.asyncio
async def test_removing_manual_coupon_restores_replaced_auto_coupon(db, customer_id):
    await make_coupon(db, code="AUTO10", type="P", discount=Decimal("10"), auto_apply=True)
    await make_coupon(db, code="FEST150")
    product = await make_product(db)
    checkout = await start_checkout_for(db, customer_id, product)
    assert checkout.coupon_code == "AUTO10"
    engine = CouponEngine()
    await engine.apply_coupon(db, checkout, "FEST150")

    result = await engine.remove_coupon(db, checkout)

    assert result.applied is True
    assert checkout.coupon_code == "AUTO10"
    assert checkout.coupon_source == CouponSource.AUTO.value
    assert checkout.total_amount == Decimal("900.00")
