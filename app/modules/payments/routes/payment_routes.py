# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/routes/payment_routes.py

Endpoints de pago del cliente.

- POST /api/payments/orders
- POST /api/payments/verify
- POST /api/payments/{order_id}/failure

Autor: Anne Creations
Fecha: 2026-03-08
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.auth.dependencies import get_current_customer_id
from app.shared.database import get_async_session

from ..providers import PaymentGateway, get_payment_gateway
from ..schemas import (
    CreatePaymentOrderRequest,
    CreatePaymentOrderResponse,
    PaymentFailureRequest,
    PaymentFailureResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from ..services import PaymentService

router = APIRouter(tags=["payments"])


@router.post("/orders", response_model=CreatePaymentOrderResponse, summary="Crear orden de pago")
async def create_payment_order(
    payload: CreatePaymentOrderRequest,
    session: AsyncSession = Depends(get_async_session),
    customer_id: UUID = Depends(get_current_customer_id),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> CreatePaymentOrderResponse:
    result = await PaymentService(gateway=gateway).create_payment_order(
        session, payload.checkout_id, customer_id
    )
    order = result.order
    return CreatePaymentOrderResponse(
        order_id=order.id,
        order_number=order.order_number,
        order_status=order.order_status,
        payment_required=result.payment_required,
        gateway_order_id=result.gateway_order_id,
        amount=result.amount,
        currency=result.currency,
        key_id=result.key_id,
        message=result.message,
    )


@router.post("/verify", response_model=VerifyPaymentResponse, summary="Verificar firma de pago")
async def verify_payment(
    payload: VerifyPaymentRequest,
    session: AsyncSession = Depends(get_async_session),
    customer_id: UUID = Depends(get_current_customer_id),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> VerifyPaymentResponse:
    outcome = await PaymentService(gateway=gateway).verify_payment(
        session,
        order_id=payload.order_id,
        customer_id=customer_id,
        gateway_order_id=payload.razorpay_order_id,
        gateway_payment_id=payload.razorpay_payment_id,
        signature=payload.razorpay_signature,
    )
    return VerifyPaymentResponse(
        order_id=outcome.order.id,
        order_number=outcome.order.order_number,
        order_status=outcome.order.order_status,
        already_processed=outcome.already_processed,
    )


@router.post("/{order_id}/failure", response_model=PaymentFailureResponse, summary="Reportar pago fallido")
async def report_payment_failure(
    order_id: UUID,
    payload: Optional[PaymentFailureRequest] = None,
    session: AsyncSession = Depends(get_async_session),
    customer_id: UUID = Depends(get_current_customer_id),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> PaymentFailureResponse:
    result = await PaymentService(gateway=gateway).report_payment_failure(
        session,
        order_id=order_id,
        customer_id=customer_id,
        reason=payload.reason if payload else None,
    )
    return PaymentFailureResponse(
        order_id=result.order.id,
        order_status=result.order.order_status,
        changed=result.changed,
    )


__all__ = ["router"]
