# -*- coding: utf-8 -*-
"""
backend/tests/factories.py

Fábricas y dobles de prueba compartidos por la suite.

Autor: Anne Creations
Fecha: 2026-03-10
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from app.modules.auth.security import ROLE_CUSTOMER, create_access_token
from app.modules.cart.services import CartService
from app.modules.catalog.models import Product, ProductOption
from app.modules.checkout.services import CheckoutService
from app.modules.coupons.enums import CouponType
from app.modules.coupons.models import Coupon
from app.modules.payments.providers import GatewayOrder
from app.modules.payments.signatures import compute_webhook_signature
from app.shared.database.types import utcnow
from app.shared.errors import PaymentGatewayError

KEY_SECRET = os.environ.get("RAZORPAY_KEY_SECRET", "test-razorpay-secret")
WEBHOOK_SECRET = os.environ.get("RAZORPAY_WEBHOOK_SECRET", "test-webhook-secret")


@dataclass
class FakeGateway:
    """Gateway en memoria: registra llamadas y puede simular fallos."""
    fail: bool = False
    calls: List[Dict[str, Any]] = field(default_factory=list)

    async def create_order(
        self,
        amount: Decimal,
        currency: str,
        receipt: str,
        notes: Optional[Dict[str, str]] = None,
    ) -> GatewayOrder:
        if self.fail:
            raise PaymentGatewayError("Payment gateway timed out")
        self.calls.append({"amount": amount, "currency": currency, "receipt": receipt, "notes": notes})
        return GatewayOrder(
            id=f"order_test_{len(self.calls)}",
            amount=amount,
            currency=currency,
            status="created",
        )


def bearer(subject, role: str = ROLE_CUSTOMER) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(subject, role=role)}"}


async def make_product(
    session,
    name: str = "Peacock Motif",
    options: Sequence[Tuple[str, str, Optional[str]]] = (("DST", "1000.00", "designs/peacock.dst"),),
) -> Product:
    product = Product(name=name, status=True)
    session.add(product)
    await session.flush()
    for i, (opt_name, price, file_path) in enumerate(options):
        session.add(
            ProductOption(
                product_id=product.id,
                name=opt_name,
                price=Decimal(price),
                file_path=file_path,
                sort_order=i,
                status=True,
            )
        )
    await session.commit()
    await session.refresh(product, attribute_names=["options"])
    return product


async def make_coupon(session, **overrides) -> Coupon:
    now = utcnow()
    data: Dict[str, Any] = dict(
        name="Festive",
        code="FEST150",
        type=CouponType.FIXED.value,
        discount=Decimal("150.00"),
        min_amount=Decimal("0.00"),
        max_discount=Decimal("0.00"),
        date_start=now - timedelta(days=1),
        date_end=now + timedelta(days=30),
        total_uses=0,
        customer_uses=0,
        status=True,
        auto_apply=False,
    )
    data.update(overrides)
    coupon = Coupon(**data)
    session.add(coupon)
    await session.commit()
    return coupon


async def fill_cart(session, customer_id: UUID, product: Product, option_ids=None) -> None:
    ids = option_ids or [product.options[0].id]
    await CartService().add_item(session, customer_id, product.id, ids)


async def start_checkout_for(session, customer_id: UUID, product: Product, option_ids=None):
    """Carrito con el producto y checkout iniciado. Devuelve el Checkout."""
    await fill_cart(session, customer_id, product, option_ids)
    started = await CheckoutService().start_checkout(session, customer_id)
    return started.checkout


async def make_order(session, customer_id: UUID, product: Product, option_ids=None):
    """Checkout + orden pending (commit). Devuelve la Order."""
    from app.modules.orders.services import OrderService

    checkout = await start_checkout_for(session, customer_id, product, option_ids)
    order = await OrderService().create_from_checkout(session, checkout)
    await session.commit()
    return order


async def make_paid_order(session, customer_id: UUID, product: Product, option_ids=None):
    from app.modules.payments.services import mark_order_paid

    order = await make_order(session, customer_id, product, option_ids)
    outcome = await mark_order_paid(session, order.id, gateway_payment_id=f"pay_{order.order_number}")
    return outcome.order


def signed_webhook(payload: Dict[str, Any], secret: str) -> Tuple[bytes, Dict[str, str]]:
    raw = json.dumps(payload).encode("utf-8")
    return raw, {
        "X-Razorpay-Signature": compute_webhook_signature(raw, secret),
        "Content-Type": "application/json",
    }


def capture_event(
    gateway_order_id: str,
    amount_paise: int,
    payment_id: str = "pay_test_1",
    order_id: Optional[UUID] = None,
    event: str = "payment.captured",
) -> Dict[str, Any]:
    notes = {"order_id": str(order_id)} if order_id else {}
    return {
        "event": event,
        "payload": {
            "payment": {
                "entity": {
                    "id": payment_id,
                    "order_id": gateway_order_id,
                    "amount": amount_paise,
                    "currency": "INR",
                    "status": "captured",
                    "notes": notes,
                }
            }
        },
    }
