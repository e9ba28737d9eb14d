# -*- coding: utf-8 -*-
"""
backend/app/modules/checkout/routes.py

Rutas de checkout.

Endpoints:
- POST /api/checkout/start
- GET  /api/checkout/{checkout_id}
- POST /api/checkout/{checkout_id}/cancel
- POST /api/admin/checkouts/expire

Autor: Anne Creations
Fecha: 2026-03-05
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.auth.dependencies import get_current_customer_id, require_admin
from app.modules.coupons.services import AutoApplyResult
from app.shared.database import get_async_session
from app.shared.database.types import utcnow

from .jobs import cleanup_expired
from .models import Checkout
from .schemas import AutoApplyOut, CheckoutResponse, ExpireCheckoutsResponse, StartCheckoutRequest
from .services import CheckoutService, checkout_totals

router = APIRouter(prefix="/checkout", tags=["checkout"])
admin_router = APIRouter(
    prefix="/admin/checkouts",
    tags=["Admin - Checkouts"],
    dependencies=[Depends(require_admin)],
)


def to_checkout_response(checkout: Checkout, auto: Optional[AutoApplyResult] = None) -> CheckoutResponse:
    totals = checkout_totals(checkout)
    auto_out = None
    if auto is not None:
        data = asdict(auto)
        data.pop("coupon_type", None)
        auto_out = AutoApplyOut(**data)
    return CheckoutResponse(
        checkout_id=checkout.id,
        status=checkout.status,
        line_items=checkout.line_items,
        billing_address=checkout.billing_snapshot,
        subtotal=totals["subtotal"],
        discount=totals["discount"],
        total=totals["total"],
        coupon_code=checkout.coupon_code,
        coupon_source=checkout.coupon_source,
        expires_at=checkout.expires_at,
        seconds_remaining=checkout.seconds_remaining(utcnow()),
        auto_apply=auto_out,
    )


@router.post("/start", response_model=CheckoutResponse, summary="Iniciar checkout desde el carrito")
async def start_checkout(
    payload: Optional[StartCheckoutRequest] = None,
    session: AsyncSession = Depends(get_async_session),
    customer_id: UUID = Depends(get_current_customer_id),
) -> CheckoutResponse:
    billing = None
    if payload is not None and payload.billing_address is not None:
        billing = payload.billing_address.model_dump()
    started = await CheckoutService().start_checkout(session, customer_id, billing)
    return to_checkout_response(started.checkout, started.auto_apply)


@router.get("/{checkout_id}", response_model=CheckoutResponse, summary="Ver checkout")
async def get_checkout(
    checkout_id: UUID,
    session: AsyncSession = Depends(get_async_session),
    customer_id: UUID = Depends(get_current_customer_id),
) -> CheckoutResponse:
    checkout = await CheckoutService().get_checkout(session, checkout_id, customer_id)
    return to_checkout_response(checkout)


@router.post("/{checkout_id}/cancel", response_model=CheckoutResponse, summary="Cancelar checkout")
async def cancel_checkout(
    checkout_id: UUID,
    session: AsyncSession = Depends(get_async_session),
    customer_id: UUID = Depends(get_current_customer_id),
) -> CheckoutResponse:
    checkout = await CheckoutService().cancel_checkout(session, checkout_id, customer_id)
    return to_checkout_response(checkout)


@admin_router.post("/expire", response_model=ExpireCheckoutsResponse, summary="Expirar checkouts caducados")
async def expire_checkouts(
    session: AsyncSession = Depends(get_async_session),
) -> ExpireCheckoutsResponse:
    expired = await cleanup_expired(session=session)
    return ExpireCheckoutsResponse(expired=expired)


__all__ = ["admin_router", "router", "to_checkout_response"]
