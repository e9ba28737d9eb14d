# -*- coding: utf-8 -*-
"""
backend/app/modules/orders/routes.py

Rutas de órdenes.

Endpoints cliente:
- GET   /api/orders
- GET   /api/orders/{order_id}

Endpoints admin:
- PATCH /api/admin/orders/{order_id}/status
- GET   /api/admin/orders/statuses

Autor: Anne Creations
Fecha: 2026-03-07
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.auth.dependencies import get_current_customer_id, require_admin
from app.shared.database import get_async_session

from .enums import OrderStatus, VALID_ORDER_TRANSITIONS
from .schemas import (
    OrderDetailOut,
    OrderHistoryOut,
    OrderListResponse,
    OrderOut,
    OrderStatusesResponse,
    UpdateOrderStatusRequest,
    UpdateOrderStatusResponse,
)
from .services import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])
admin_router = APIRouter(
    prefix="/admin/orders",
    tags=["Admin - Orders"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=OrderListResponse, summary="Órdenes del cliente")
async def list_orders(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    session: AsyncSession = Depends(get_async_session),
    customer_id: UUID = Depends(get_current_customer_id),
) -> OrderListResponse:
    items, total = await OrderService().list_customer_orders(
        session, customer_id, status=status_filter, offset=offset, limit=limit
    )
    return OrderListResponse(
        items=[OrderOut.model_validate(o) for o in items],
        total=total,
        offset=offset,
        limit=limit,
    )


@router.get("/{order_id}", response_model=OrderDetailOut, summary="Detalle de orden")
async def get_order(
    order_id: UUID,
    session: AsyncSession = Depends(get_async_session),
    customer_id: UUID = Depends(get_current_customer_id),
) -> OrderDetailOut:
    service = OrderService()
    order = await service.get_customer_order(session, order_id, customer_id)
    history = await service.get_history(session, order.id)
    detail = OrderDetailOut.model_validate(order)
    detail.history = [OrderHistoryOut.model_validate(h) for h in history]
    return detail


@admin_router.get("/statuses", response_model=OrderStatusesResponse)
async def list_order_statuses() -> OrderStatusesResponse:
    return OrderStatusesResponse(
        statuses=[s.value for s in OrderStatus],
        transitions={
            src.value: sorted(dst.value for dst in targets)
            for src, targets in VALID_ORDER_TRANSITIONS.items()
        },
    )


@admin_router.patch("/{order_id}/status", response_model=UpdateOrderStatusResponse)
async def update_order_status(
    order_id: UUID,
    payload: UpdateOrderStatusRequest,
    session: AsyncSession = Depends(get_async_session),
) -> UpdateOrderStatusResponse:
    result = await OrderService().update_order_status(
        session, order_id, payload.status, comment=payload.comment, notify=payload.notify
    )
    return UpdateOrderStatusResponse(order=OrderOut.model_validate(result.order), changed=result.changed)


__all__ = ["admin_router", "router"]
