# -*- coding: utf-8 -*-
"""
backend/app/modules/coupons/routes.py

Cupones sobre un checkout abierto.

Endpoints:
- POST   /api/checkout/{checkout_id}/coupon
- DELETE /api/checkout/{checkout_id}/coupon
- GET    /api/checkout/{checkout_id}/coupon/auto-apply

Autor: Anne Creations
Fecha: 2026-03-06
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.auth.dependencies import get_current_customer_id
from app.modules.checkout.routes import to_checkout_response
from app.modules.checkout.schemas import CheckoutResponse
from app.modules.checkout.services import CheckoutService
from app.shared.database import get_async_session

from .schemas import ApplyCouponRequest, ApplyCouponResponse, CouponOut
from .services import CouponEngine

router = APIRouter(prefix="/checkout/{checkout_id}/coupon", tags=["coupons"])


@router.post("", response_model=ApplyCouponResponse, summary="Aplicar código de cupón")
async def apply_coupon(
    checkout_id: UUID,
    payload: ApplyCouponRequest,
    session: AsyncSession = Depends(get_async_session),
    customer_id: UUID = Depends(get_current_customer_id),
) -> ApplyCouponResponse:
    checkout = await CheckoutService().get_checkout(session, checkout_id, customer_id)
    applied = await CouponEngine().apply_coupon(session, checkout, payload.code)
    await session.commit()

    coupon = applied.coupon
    calc = applied.calculation
    return ApplyCouponResponse(
        result=applied.result,
        coupon=CouponOut(code=coupon.code, name=coupon.name, type=coupon.type, discount=coupon.discount),
        subtotal=calc.subtotal,
        discount_amount=calc.discount_amount,
        final_amount=calc.final_amount,
    )


@router.delete("", response_model=CheckoutResponse, summary="Quitar cupón")
async def remove_coupon(
    checkout_id: UUID,
    session: AsyncSession = Depends(get_async_session),
    customer_id: UUID = Depends(get_current_customer_id),
) -> CheckoutResponse:
    checkout = await CheckoutService().get_checkout(session, checkout_id, customer_id)
    auto = await CouponEngine().remove_coupon(session, checkout)
    await session.commit()
    return to_checkout_response(checkout, auto)


@router.get("/auto-apply", response_model=CheckoutResponse, summary="Evaluar cupón automático")
async def auto_apply_coupon(
    checkout_id: UUID,
    session: AsyncSession = Depends(get_async_session),
    customer_id: UUID = Depends(get_current_customer_id),
) -> CheckoutResponse:
    checkout = await CheckoutService().get_checkout(session, checkout_id, customer_id)
    auto = await CouponEngine().evaluate_auto_apply(session, checkout)
    await session.commit()
    return to_checkout_response(checkout, auto)


__all__ = ["router"]
